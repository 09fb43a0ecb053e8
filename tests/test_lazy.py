import pytest
from memorizer import Lazy


def test_lazy_evaluates_once():
    printed = []

    def too_lazy():
        printed.append("too lazy too print many times")
        return 123

    lazy_value = Lazy(too_lazy)
    assert not lazy_value.is_evaluated()
    assert repr(lazy_value) == "Lazy(?)"

    # regardless of how many times it is read, it is only computed once
    assert lazy_value.get() == 123
    assert lazy_value.get() == 123
    assert lazy_value() == 123
    assert len(printed) == 1
    assert lazy_value.is_evaluated()
    assert repr(lazy_value) == "Lazy(123)"


def test_lazy_failure_is_retried():
    attempts = []

    def flaky():
        attempts.append(1)
        if len(attempts) == 1:
            raise OSError("not yet")
        return "ready"

    lazy_value = Lazy(flaky)
    with pytest.raises(OSError):
        lazy_value.get()
    assert not lazy_value.is_evaluated()
    assert lazy_value.get() == "ready"
    assert lazy_value.get() == "ready"
    assert len(attempts) == 2


def test_lazy_map():
    calls = []
    base = Lazy(lambda: calls.append("base") or 21)
    doubled = base.map(lambda x: x * 2)
    assert calls == []
    assert doubled.get() == 42
    assert doubled.get() == 42
    assert base.get() == 21
    assert calls == ["base"]
