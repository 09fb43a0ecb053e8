import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, List, Optional

from lxml.builder import E  # type: ignore
from lxml import etree  # type: ignore

from memo_bench_args import ScenarioArgs
from memorizer import Memorizer, Outcome


@dataclass
class CallRecord:
    index: int
    key: Any
    value: Optional[str]
    elapsed_ms: float
    cached: bool  # the key was already in the cache when the call started
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def summary(self) -> str:
        if self.failed:
            return "%r failed (%s) in %dms" % (self.key, self.error, self.elapsed_ms)
        return "%s in %dms" % (self.value, self.elapsed_ms)


class BenchContext:
    def __init__(self, args: ScenarioArgs):
        self.args = args
        self.computation = args.computation.to_function()
        self.memo: Memorizer = Memorizer(self.computation)
        self.records: List[CallRecord] = []
        self._lock = threading.Lock()

    def call(self, index: int, key: Any) -> CallRecord:
        cached = key in self.memo
        start = time.perf_counter()
        outcome = Outcome.attempt(self.memo, key)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        record = CallRecord(index, key, outcome.value, elapsed_ms, cached,
                            None if outcome.succeeded else "%s: %s" % (type(outcome.error).__name__, outcome.error))
        with self._lock:
            self.records.append(record)
        return record

    def run(self) -> List[CallRecord]:
        keys = self.args.calls.keys
        if self.args.calls.is_concurrent():
            with ThreadPoolExecutor(max_workers=self.args.calls.workers) as pool:
                futures = [pool.submit(self.call, i, k) for i, k in enumerate(keys)]
                for f in futures:
                    print(f.result().summary())
        else:
            for i, k in enumerate(keys):
                print(self.call(i, k).summary())
        self.records.sort(key=lambda r: r.index)
        return self.records

    def failure_count(self) -> int:
        return len([r for r in self.records if r.failed])

    # keys still missing from the cache, i.e. every call for them failed
    def unresolved_keys(self) -> List[Any]:
        r: List[Any] = []
        for k in self.args.calls.keys:
            if k not in self.memo and k not in r:
                r.append(k)
        return r

    def junit_xml(self) -> etree._Element:
        cases = []
        for r in self.records:
            content: Any = ""
            if r.failed:
                content = E.failure(r.error, message=r.error)
            cases.append(E.testcase(content,
                                    classname="memo_bench",
                                    name="call[%d]-%s" % (r.index, r.key),
                                    time="%.3f" % (r.elapsed_ms / 1000.0),
                                    key=str(r.key),
                                    cached=str(r.cached).lower(),
                                    value="" if r.value is None else str(r.value)))
        stats = self.memo.stats()
        return E.testsuites(E.testsuite(*cases,
                                        name="memo-bench",
                                        tests=str(len(self.records)),
                                        failures=str(self.failure_count()),
                                        delay_ms=str(self.computation.delay_ms),
                                        workers=str(self.args.calls.workers),
                                        memo_hits=str(stats.hits),
                                        memo_misses=str(stats.misses),
                                        memo_failures=str(stats.failures)))

    def write_report(self) -> str:
        path = self.args.report.result_file()
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as out:
            out.write(etree.tostring(self.junit_xml(), encoding="unicode", pretty_print=True))
        return path
