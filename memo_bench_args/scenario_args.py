from pathlib import Path
from typing import Any, Callable, Optional

from yaml2obj.loader import FULLPATH_KEY, YamlLoaderWithLineNumber, line_of
from yaml2obj.writer import YamlWriter

from memo_bench_args.calls import CallsArgs
from memo_bench_args.computation import ComputationArgs
from memo_bench_args.error_counter import ErrorCounter
from memo_bench_args.report import ReportArgs

SCHEMA_VERSION = "1.0"


class ScenarioArgs:
    def __init__(self):
        self.computation = ComputationArgs(self)
        self.calls = CallsArgs(self)
        self.report = ReportArgs(self)
        self.source_path: Optional[str] = None
        self.error_counter = ErrorCounter()

    # fill content from a loaded YAML object and record every problem found.
    # 'data' should have line number information
    def fill_and_validate(self, data: Any):
        self.error_counter = ErrorCounter()
        if not isinstance(data, dict):
            self.error_counter.record("scenario file must be a mapping")
            return
        self.source_object = data
        self.source_path = data.get(FULLPATH_KEY)
        self.schema_version = str(data.get("schema-version", SCHEMA_VERSION))
        if self.schema_version != SCHEMA_VERSION:
            self.error_counter.record("unsupported schema-version %s" % self.schema_version,
                                      line_of(data, "schema-version"))
        self.computation.fill_and_validate(
            self.section(data, "computation"), self.error_counter)
        self.calls.fill_and_validate(
            self.section(data, "calls"), self.error_counter)
        self.report.fill_and_validate(
            self.section(data, "report"), self.error_counter)

    def section(self, data: dict, key: str) -> Optional[dict]:
        s = data.get(key)
        if s is not None and not isinstance(s, dict):
            self.error_counter.record("%s section must be a mapping" % key, line_of(data, key))
            return None
        return s

    def write_to(self, writer: YamlWriter):
        writer.comment("memo-bench scenario configuration file")
        writer.comment(
            "A slow computation is memoized and called once for each entry of calls.keys")
        writer.comment(" ")

        writer.name("schema-version").value(SCHEMA_VERSION)

        writer.name("computation").begin_object()
        self.computation.write_to(writer)
        writer.end_object()

        writer.name("calls").begin_object()
        self.calls.write_to(writer)
        writer.end_object()

        writer.name("report").begin_object()
        self.report.write_to(writer)
        writer.end_object()

    def write_as_yaml(self, path: str):
        p = Path(path).resolve()
        p.parents[0].mkdir(parents=True, exist_ok=True)
        with p.open('w') as s:
            self.write_to(YamlWriter(s))

    # read value from dictionary and verify the content.
    # if error is not found, return the value itself
    # else, record error message with line number information and return None
    def check_mandatory_field(self, data: dict, key: str, verifier: Callable[[Any], Optional[str]],
                              error_counter: ErrorCounter) -> Any:
        value = data.get(key)
        if value is None:
            error_counter.record("object from line %d: key %s is not found" % (
                line_of(data), key))
            return None
        msg = verifier(value)
        if msg is not None:
            error_counter.record("@%s: %s" % (key, msg), line_of(data, key))
            return None
        return value

    # parse optional integer field, 'minimum' included
    def check_int_field(self, data: dict, key: str, default_value: int, error_counter: ErrorCounter,
                        minimum: int = 0) -> Optional[int]:
        value = data.get(key)
        if value is None:
            return default_value
        return self.check_int_value(value, key, line_of(data, key), error_counter, minimum)

    def check_int_value(self, value: Any, key: str, line: int, error_counter: ErrorCounter,
                        minimum: int = 0) -> Optional[int]:
        if isinstance(value, bool):
            error_counter.record("attribute %s: %s is not an integer" % (key, value), line)
            return None
        try:
            n = int(value)
        except (TypeError, ValueError):
            error_counter.record("attribute %s: %s is not an integer" % (key, value), line)
            return None
        if n < minimum:
            error_counter.record("attribute %s: %d must be %d or more" % (key, n, minimum), line)
            return None
        return n

    @classmethod
    def from_yaml(cls, path: str) -> "ScenarioArgs":
        args = ScenarioArgs()
        args.fill_and_validate(YamlLoaderWithLineNumber.from_file(path))
        return args

    @classmethod
    def from_string(cls, body: str) -> "ScenarioArgs":
        args = ScenarioArgs()
        args.fill_and_validate(YamlLoaderWithLineNumber.from_string(body))
        return args

    # the scenario of the classic demonstration: key 2 twice, then key 3
    @classmethod
    def auto_configure(cls) -> "ScenarioArgs":
        args = ScenarioArgs()
        args.schema_version = SCHEMA_VERSION
        args.computation = ComputationArgs.auto_configure(args)
        args.calls = CallsArgs.auto_configure(args)
        args.report = ReportArgs.auto_configure(args)
        return args
