import os
import threading
import time
from typing import TYPE_CHECKING, Any, Dict, Optional

from yaml2obj.loader import line_of
from yaml2obj.writer import YamlWriter
from memo_bench_args.error_counter import ErrorCounter

if TYPE_CHECKING:
    from memo_bench_args.scenario_args import ScenarioArgs

DEFAULT_DELAY_MS = 1000


class ComputationFailure(Exception):
    pass


class SlowComputation:
    """sleep for delay_ms, then return prefix + key.

    the first 'fail_first' invocations for each key raise ComputationFailure instead,
    which shows that a failure is not remembered by the memorizer.
    """

    def __init__(self, delay_ms: int, prefix: str = "v", fail_first: int = 0):
        self.delay_ms = delay_ms
        self.prefix = prefix
        self.fail_first = fail_first
        self.invocations: Dict[Any, int] = {}
        self._lock = threading.Lock()

    def __call__(self, key: Any) -> str:
        with self._lock:
            n = self.invocations.get(key, 0) + 1
            self.invocations[key] = n
        time.sleep(self.delay_ms / 1000.0)
        if n <= self.fail_first:
            raise ComputationFailure("invocation %d for key %r failed on purpose" % (n, key))
        return self.prefix + str(key)

    def total_invocations(self) -> int:
        with self._lock:
            return sum(self.invocations.values())


class ComputationArgs:
    def __init__(self, parent: "ScenarioArgs"):
        self.parent = parent

    def fill_and_validate(self, data: Optional[dict], error_counter: ErrorCounter):
        if data is None:
            error_counter.record("computation section is empty")
            return
        self.delay_spec = data.get("delay_ms", DEFAULT_DELAY_MS)
        self.delay_ms = self.eval_delay_ms(self.delay_spec, line_of(data, "delay_ms"), error_counter)
        self.prefix = str(data.get("prefix", "v"))
        self.fail_first = self.parent.check_int_field(data, "fail_first", 0, error_counter)

    # supported:
    # * integer -> milliseconds
    # * "$ENV" -> read milliseconds from the environment variable ENV
    def eval_delay_ms(self, spec: Any, line: int, error_counter: ErrorCounter) -> Optional[int]:
        if isinstance(spec, str) and spec.startswith("$"):
            name = spec[1:]
            value = os.getenv(name)
            if value is None:
                error_counter.record(
                    "environment variable %s for delay_ms is not defined" % name, line)
                return None
            return self.parent.check_int_value(value, "delay_ms", line, error_counter)
        return self.parent.check_int_value(spec, "delay_ms", line, error_counter)

    def write_to(self, writer: YamlWriter):
        writer.comment("milliseconds the computation sleeps, or $ENV_VAR to read it from the environment")
        writer.name("delay_ms").value(self.delay_spec)
        writer.comment("the computation returns prefix + key")
        writer.name("prefix").value(self.prefix)
        writer.comment("number of failing invocations per key before it succeeds")
        writer.name("fail_first").value(self.fail_first)

    def to_function(self) -> SlowComputation:
        return SlowComputation(self.delay_ms, self.prefix, self.fail_first)

    @classmethod
    def auto_configure(cls, parent: "ScenarioArgs") -> "ComputationArgs":
        a = ComputationArgs(parent)
        a.delay_spec = DEFAULT_DELAY_MS
        a.delay_ms = DEFAULT_DELAY_MS
        a.prefix = "v"
        a.fail_first = 0
        return a
