from lxml import etree  # type: ignore

from memorizer import Memorizer
from pytest_memorizer.plugin import CallCounter, MemoReport


def test_memoize_fixture(memoize, call_counter):
    wrapped = memoize(call_counter.wrap(lambda x: x + x))
    assert isinstance(wrapped, Memorizer)
    assert wrapped(2) == 4
    assert wrapped(2) == 4
    assert call_counter[2] == 1
    assert call_counter.total == 1


def test_slow_computation_fixture(slow_computation, memo_delay_ms):
    assert slow_computation(3) == "v3"


def test_call_counter():
    counter = CallCounter()
    f = counter.wrap(str)
    f(1)
    f(1)
    f(2)
    assert counter[1] == 2
    assert counter[2] == 1
    assert counter[3] == 0
    assert counter.total == 3


def test_memo_report(tmp_path):
    m1 = Memorizer(lambda x: x)
    m1(1)
    m1(1)
    m2 = Memorizer(lambda x: x)
    m2(1)

    path = tmp_path / "report" / "memo.xml"
    report = MemoReport(str(path))
    report.add("tests/test_a.py::T::test_m", [m1, m2])
    report.add("tests/test_a.py::test_nothing", [])
    report.write()

    suite = etree.parse(str(path)).getroot().find("testsuite")
    assert suite.get("tests") == "1"
    (case,) = suite.findall("testcase")
    assert case.get("classname") == "tests.test_a"
    assert case.get("name") == "T::test_m"
    assert case.get("memorizers") == "2"
    assert case.get("entries") == "2"
    assert case.get("hits") == "1"
    assert case.get("misses") == "2"
    assert case.get("failures") == "0"
