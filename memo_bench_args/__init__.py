from .scenario_args import ScenarioArgs
from .computation import ComputationFailure, SlowComputation
from .error_counter import ErrorCounter

__all__ = ["ScenarioArgs", "ComputationFailure", "SlowComputation", "ErrorCounter"]
