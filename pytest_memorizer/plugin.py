import os
import time
from collections import Counter
from typing import Any, Callable, List, Optional

import pytest
from lxml.builder import E  # type: ignore
from lxml import etree  # type: ignore

from memorizer import Memorizer

# global scope test session report, None unless --memo-report is given
report: Optional["MemoReport"] = None


class CallCounter:
    """wraps a function and counts its invocations, per argument and in total"""

    def __init__(self):
        self.per_key: Counter = Counter()

    def wrap(self, f: Callable[[Any], Any]) -> Callable[[Any], Any]:
        def counted(key):
            self.per_key[key] += 1
            return f(key)
        return counted

    @property
    def total(self) -> int:
        return sum(self.per_key.values())

    def __getitem__(self, key) -> int:
        return self.per_key[key]


class MemoReportEntry:
    def __init__(self, nodeid: str, memorizers: List[Memorizer]):
        self.nodeid = nodeid
        self.memorizers = len(memorizers)
        self.entries = sum(len(m) for m in memorizers)
        stats = [m.stats() for m in memorizers]
        self.hits = sum(s.hits for s in stats)
        self.misses = sum(s.misses for s in stats)
        self.failures = sum(s.failures for s in stats)


class MemoReport:
    def __init__(self, path: str):
        self.path = path
        self.entry_list: List[MemoReportEntry] = []

    def add(self, nodeid: str, memorizers: List[Memorizer]) -> None:
        if len(memorizers) > 0:
            self.entry_list.append(MemoReportEntry(nodeid, memorizers))

    def junit_xml(self) -> etree._Element:
        cases = []
        for e in self.entry_list:
            # sample of nodeid: 'tests/test_memorizer.py::Test_Memorizer::test_memorize'
            file, _, name = e.nodeid.partition("::")
            cases.append(E.testcase(classname=file.replace(".py", "").replace("/", "."),
                                    name=name,
                                    memorizers=str(e.memorizers),
                                    entries=str(e.entries),
                                    hits=str(e.hits),
                                    misses=str(e.misses),
                                    failures=str(e.failures)))
        return E.testsuites(E.testsuite(*cases, name="memorizer", tests=str(len(cases))))

    def write(self) -> None:
        d = os.path.dirname(self.path)
        if d and not os.path.exists(d):
            os.makedirs(d)
        with open(self.path, "w", encoding="utf-8") as out:
            out.write(etree.tostring(self.junit_xml(), encoding="unicode", pretty_print=True))


def pytest_addoption(parser):
    group = parser.getgroup("memorizer arguments")
    group.addoption('--memo-delay-ms',
                    action="store",
                    dest="memo_delay_ms",
                    type=int,
                    metavar="MS",
                    default=200,
                    help="delay of the slow_computation fixture in milliseconds")
    group.addoption('--memo-report',
                    action="store",
                    dest="memo_report",
                    metavar="PATH",
                    default=None,
                    help="write memorizer statistics of each test to PATH as JUnit XML")


def pytest_configure(config) -> None:
    global report
    path = config.getoption("memo_report", None)
    report = MemoReport(path) if path else None


def pytest_sessionfinish(session) -> None:
    if report is None:
        return
    report.write()
    print("\nmemorizer report is written to %s" % report.path)


@pytest.fixture
def memoize(request):
    """factory of fresh memorizers: memoize(f) -> Memorizer"""
    created: List[Memorizer] = []

    def factory(f):
        m = Memorizer(f)
        created.append(m)
        return m
    yield factory
    if report is not None:
        report.add(request.node.nodeid, created)


@pytest.fixture
def call_counter() -> CallCounter:
    return CallCounter()


@pytest.fixture
def memo_delay_ms(request) -> int:
    return request.config.getoption("memo_delay_ms")


@pytest.fixture
def slow_computation(memo_delay_ms: int) -> Callable[[Any], str]:
    def slow(key):
        time.sleep(memo_delay_ms / 1000.0)
        return "v" + str(key)
    return slow
