import os
from typing import TYPE_CHECKING, Optional

from yaml2obj.writer import YamlWriter
from memo_bench_args.error_counter import ErrorCounter

if TYPE_CHECKING:
    from memo_bench_args.scenario_args import ScenarioArgs

DEFAULT_RESULT_DIR = "memo-bench-result"
RESULT_FILE_NAME = "bench-results.xml"


class ReportArgs:
    def __init__(self, parent: "ScenarioArgs"):
        self.parent = parent
        self.result_dir = DEFAULT_RESULT_DIR

    def fill_and_validate(self, data: Optional[dict], error_counter: ErrorCounter):
        # report section can be empty
        if data is None:
            self.result_dir = DEFAULT_RESULT_DIR
        else:
            self.result_dir = str(data.get("result_dir", DEFAULT_RESULT_DIR))

    def write_to(self, writer: YamlWriter):
        writer.comment("The call timings are placed here in JUnit XML format")
        writer.name("result_dir").value(self.result_dir)

    def result_file(self) -> str:
        return os.path.join(self.result_dir, RESULT_FILE_NAME)

    @classmethod
    def auto_configure(cls, parent: "ScenarioArgs") -> "ReportArgs":
        return ReportArgs(parent)
