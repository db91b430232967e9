import pytest

from toolbelt.errorx import JoinError, defer, join


def test_join_nothing_is_none():
    assert join() is None
    assert join(None, None) is None


def test_join_skips_none():
    first = ValueError("first")
    second = KeyError("second")
    joined = join(first, None, second)
    assert joined.errors == [first, second]


def test_join_message_is_newline_separated():
    joined = join(ValueError("first"), ValueError("second"))
    assert str(joined) == "first\nsecond"


def test_join_error_can_be_raised():
    first = ValueError("boom")
    with pytest.raises(JoinError) as info:
        raise join(first)
    assert info.value.errors == [first]


def test_unwrap_drops_first():
    first, second = ValueError("a"), ValueError("b")
    joined = join(first, second)
    assert joined.unwrap().errors == [second]
    assert joined.unwrap().unwrap().errors == []
    assert joined.unwrap().unwrap().unwrap() is None


def test_matches_instance_and_type():
    first, second = ValueError("a"), KeyError("b")
    joined = join(first, second)
    assert joined.matches(first)
    assert joined.matches(KeyError)
    assert not joined.matches(TypeError)
    assert not joined.matches(ValueError("a"))


def test_matches_nested_and_cause():
    inner = OSError("disk")
    try:
        try:
            raise inner
        except OSError as exc:
            raise RuntimeError("wrapped") from exc
    except RuntimeError as wrapped:
        outer = join(join(ValueError("x"), wrapped))
    assert outer.matches(inner)
    assert outer.matches(OSError)


def _ok():
    return None


def _fail_with(exc):
    def fn():
        raise exc

    return fn


def test_defer_success_without_error():
    assert defer(_ok, None) is None


def test_defer_failure_without_error():
    exc = OSError("close failed")
    assert defer(_fail_with(exc), None).errors == [exc]


def test_defer_success_with_error():
    err = ValueError("earlier")
    assert defer(_ok, err).errors == [err]


def test_defer_failure_with_error():
    err = ValueError("earlier")
    exc = OSError("close failed")
    assert defer(_fail_with(exc), err).errors == [err, exc]