from typing import Callable, Generic, TypeVar

from .wrapper import Memorizer

T = TypeVar("T")
U = TypeVar("U")

# the only key a Lazy ever uses
_UNIT = ()


class Lazy(Generic[T]):
    """a value computed on first access and then remembered.

    like the memorizer it is built on, a supplier which raises is not
    remembered: the next get() calls the supplier again.
    """

    def __init__(self, supplier: Callable[[], T]):
        self._memo: Memorizer = Memorizer(lambda _: supplier())

    def get(self) -> T:
        return self._memo(_UNIT)

    def is_evaluated(self) -> bool:
        return _UNIT in self._memo

    def map(self, f: Callable[[T], U]) -> "Lazy[U]":
        return Lazy(lambda: f(self.get()))

    def __call__(self) -> T:
        return self.get()

    def __repr__(self) -> str:
        entry = self._memo.lookup(_UNIT)
        return "Lazy(%r)" % (entry.value,) if entry is not None else "Lazy(?)"
