from typing import TYPE_CHECKING, Any, List, Optional

from yaml2obj.writer import YamlWriter
from memo_bench_args.error_counter import ErrorCounter

if TYPE_CHECKING:
    from memo_bench_args.scenario_args import ScenarioArgs


class CallsArgs:
    def __init__(self, parent: "ScenarioArgs"):
        self.parent = parent

    def fill_and_validate(self, data: Optional[dict], error_counter: ErrorCounter):
        def verify_keys(keys: Any) -> Optional[str]:
            if not isinstance(keys, list) or len(keys) == 0:
                return "keys must be a non-empty list"
            for k in keys:
                # mappings and lists can not be used as a cache key
                if isinstance(k, (dict, list)):
                    return "key %r is not a scalar" % (k,)
            return None

        if data is None:
            error_counter.record("calls section is empty")
            return
        self.keys: Optional[List[Any]] = self.parent.check_mandatory_field(
            data, "keys", verify_keys, error_counter)
        self.workers = self.parent.check_int_field(
            data, "workers", 1, error_counter, minimum=1)

    def write_to(self, writer: YamlWriter):
        writer.comment("the memoized computation is called with each key, in this order")
        writer.name("keys").values(self.keys)
        writer.comment("more than 1 worker calls the keys concurrently from a thread pool")
        writer.name("workers").value(self.workers)

    def is_concurrent(self) -> bool:
        return self.workers > 1

    @classmethod
    def auto_configure(cls, parent: "ScenarioArgs") -> "CallsArgs":
        a = CallsArgs(parent)
        a.keys = [2, 2, 3]
        a.workers = 1
        return a
