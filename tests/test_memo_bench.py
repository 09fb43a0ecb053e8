import os
from lxml import etree  # type: ignore

from memo_bench.__main__ import main
from memo_bench.runner import BenchContext
from memo_bench_args import ScenarioArgs


def make_args(delay_ms: int, keys, workers: int = 1, fail_first: int = 0, result_dir: str = "out") -> ScenarioArgs:
    args = ScenarioArgs.auto_configure()
    args.computation.delay_ms = delay_ms
    args.computation.fail_first = fail_first
    args.calls.keys = keys
    args.calls.workers = workers
    args.report.result_dir = result_dir
    return args


def test_classic_scenario():
    bench = BenchContext(make_args(100, [2, 2, 3]))
    records = bench.run()

    assert [r.value for r in records] == ["v2", "v2", "v3"]
    assert [r.cached for r in records] == [False, True, False]
    assert records[0].elapsed_ms >= 100
    assert records[1].elapsed_ms < 100
    assert records[2].elapsed_ms >= 100
    assert bench.computation.total_invocations() == 2
    assert bench.unresolved_keys() == []


def test_failing_computation_is_retried():
    bench = BenchContext(make_args(0, [1, 1, 1], fail_first=1))
    records = bench.run()

    assert records[0].failed
    assert records[0].error.startswith("ComputationFailure")
    assert records[1].value == "v1"
    assert not records[1].cached
    assert records[2].cached
    assert bench.failure_count() == 1
    assert bench.computation.invocations[1] == 2


def test_unresolved_keys():
    bench = BenchContext(make_args(0, ["a", "b", "a"], fail_first=5))
    bench.run()
    assert bench.unresolved_keys() == ["a", "b"]


def test_concurrent_scenario():
    bench = BenchContext(make_args(200, [5] * 6 + [6] * 2, workers=8))
    records = bench.run()

    assert [r.index for r in records] == list(range(8))
    assert [r.value for r in records] == ["v5"] * 6 + ["v6"] * 2
    assert bench.computation.invocations == {5: 1, 6: 1}, "each key must be computed only once"


def test_junit_xml(tmp_path):
    bench = BenchContext(make_args(0, [2, 2], fail_first=1, result_dir=str(tmp_path / "result")))
    bench.run()
    path = bench.write_report()

    assert path == os.path.join(str(tmp_path / "result"), "bench-results.xml")
    suite = etree.parse(path).getroot().find("testsuite")
    assert suite.get("name") == "memo-bench"
    assert suite.get("tests") == "2"
    assert suite.get("failures") == "1"
    assert suite.get("memo_misses") == "2"
    cases = suite.findall("testcase")
    assert [c.get("name") for c in cases] == ["call[0]-2", "call[1]-2"]
    assert cases[0].find("failure") is not None
    assert cases[1].get("value") == "v2"


def test_cli_create_verify_run(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main(["--create"]) == 0
    assert os.path.isfile(".memo-bench.d/scenario.yml")
    assert main(["--verify"]) == 0

    with open("fast.yml", "w") as f:
        f.write("computation:\n  delay_ms: 10\ncalls:\n  keys: [2, 2, 3]\nreport:\n  result_dir: timings\n")
    capsys.readouterr()
    assert main(["--run", "--file", "fast.yml"]) == 0
    out = capsys.readouterr().out
    assert "v2 in " in out
    assert "computation ran 2 times for 3 calls (1 cache hits)" in out
    assert os.path.isfile(os.path.join("timings", "bench-results.xml"))


def test_cli_errors(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main([]) == 1
    assert main(["--verify", "--file", "missing.yml"]) == 1

    with open("broken.yml", "w") as f:
        f.write("computation:\n  delay_ms: never\n")
    assert main(["--verify", "--file", "broken.yml"]) == 1
    out = capsys.readouterr().out
    assert "total 2 errors are found." in out

    with open("failing.yml", "w") as f:
        f.write("computation:\n  delay_ms: 0\n  fail_first: 9\ncalls:\n  keys: [1]\n")
    assert main(["--run", "--file", "failing.yml"]) == 1
