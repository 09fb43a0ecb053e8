from .wrapper import MemoEntry, Memorizer, MemoStats, memoized, memorizer
from .outcome import Outcome
from .lazy import Lazy

__all__ = ["MemoEntry", "Memorizer", "MemoStats", "memoized", "memorizer", "Outcome", "Lazy"]
