import pytest
from memorizer import Outcome


def multiple_exceptions(x):
    raise ValueError("bad argument %d" % x)


def test_attempt_success():
    o = Outcome.attempt(lambda x: x * 2, 2)
    assert o.succeeded
    assert not o.failed
    assert o.get() == 4
    assert o.get_or_else(-1) == 4
    assert repr(o) == "Success(4)"


def test_attempt_failure():
    o = Outcome.attempt(multiple_exceptions, 2)
    assert o.failed
    assert isinstance(o.error, ValueError)
    assert o.get_or_else(-1) == -1
    with pytest.raises(ValueError) as e:
        o.get()
    assert e.value is o.error


def test_recover():
    recovered = Outcome.attempt(multiple_exceptions, 2).recover(ValueError, lambda e: 777)
    assert recovered.get() == 777

    # only the given exception type is recovered
    not_recovered = Outcome.attempt(multiple_exceptions, 2).recover(KeyError, lambda e: 777)
    assert not_recovered.failed
    assert not_recovered.get_or_else(-1) == -1

    # a success is left as is
    assert Outcome.success(1).recover(ValueError, lambda e: 777).get() == 1


def test_map():
    assert Outcome.success("djordje").map(str.upper).get() == "DJORDJE"
    failed = Outcome.failure(KeyError("k"))
    assert failed.map(str.upper) is failed
    # an exception raised by the mapping function becomes a failure
    assert Outcome.success("").map(lambda s: s[0]).failed


def test_failure_requires_exception():
    with pytest.raises(TypeError):
        Outcome.failure("not an exception")


def test_base_exceptions_are_not_captured():
    def interrupted():
        raise KeyboardInterrupt()

    with pytest.raises(KeyboardInterrupt):
        Outcome.attempt(interrupted)
