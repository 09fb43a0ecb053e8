# result of a computation which may have raised.
# the memorizer decides whether to cache by looking at the outcome,
# the exception itself is re-raised only at the public boundary.

from typing import Any, Callable, Generic, Optional, Type, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class Outcome(Generic[T]):
    __slots__ = ("value", "error")

    def __init__(self, value: Optional[T] = None, error: Optional[Exception] = None):
        self.value = value
        self.error = error

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> "Outcome[Any]":
        if not isinstance(error, Exception):
            raise TypeError("failure requires an exception, got %r" % (error,))
        return cls(error=error)

    @classmethod
    def attempt(cls, f: Callable[..., T], *args: Any) -> "Outcome[T]":
        """run f(*args) and capture either its value or the exception it raised"""
        try:
            return cls.success(f(*args))
        except Exception as e:
            # KeyboardInterrupt / SystemExit are not captured
            return cls.failure(e)

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def get(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore

    def get_or_else(self, default: T) -> T:
        return self.value if self.error is None else default  # type: ignore

    def map(self, f: Callable[[T], U]) -> "Outcome[U]":
        if self.error is not None:
            return self  # type: ignore
        return Outcome.attempt(f, self.value)

    def recover(self, exception_type: Type[Exception], f: Callable[[Exception], T]) -> "Outcome[T]":
        if self.error is not None and isinstance(self.error, exception_type):
            return Outcome.attempt(f, self.error)
        return self

    def __repr__(self) -> str:
        if self.error is not None:
            return "Failure(%r)" % (self.error,)
        return "Success(%r)" % (self.value,)
