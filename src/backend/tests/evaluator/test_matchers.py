import pytest

from evaluator.matchers import RuleMatcher, all_of, any_of, none_of, not_


def _const(name, value, calls=None):
    def _predicate():
        if calls is not None:
            calls.append(name)
        return value

    return RuleMatcher(name, _predicate)


def test_combinators_compose_descriptions():
    a, b = _const("a", True), _const("b", False)

    assert all_of(a, b).description == "all_of(a, b)"
    assert any_of(a, b).description == "any_of(a, b)"
    assert none_of(a, b).description == "none_of(a, b)"
    assert not_(a).description == "not(a)"
    assert (a & ~b).description == "all_of(a, not(b))"


@pytest.mark.parametrize(
    "left, right",
    [(True, True), (True, False), (False, True), (False, False)],
)
def test_combinators_follow_boolean_logic(left, right):
    a, b = _const("a", left), _const("b", right)

    assert all_of(a, b).matches() is (left and right)
    assert any_of(a, b).matches() is (left or right)
    assert none_of(a, b).matches() is (not left and not right)
    assert (a & b).matches() is (left and right)
    assert (a | b).matches() is (left or right)
    assert (~a).matches() is (not left)


def test_all_of_short_circuits_left_to_right():
    calls = []
    matcher = all_of(_const("a", False, calls), _const("b", True, calls))

    assert not matcher.matches()
    assert calls == ["a"]


def test_any_of_short_circuits_left_to_right():
    calls = []
    matcher = any_of(_const("a", True, calls), _const("b", True, calls))

    assert matcher.matches()
    assert calls == ["a"]


def test_errors_propagate_from_predicates():
    def _boom():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        not_(RuleMatcher("boom", _boom)).matches()


def test_repeated_evaluation_is_idempotent():
    matcher = any_of(_const("a", False), _const("b", True))

    assert [matcher.matches() for _ in range(3)] == [True, True, True]


def test_matcher_refuses_implicit_truthiness():
    with pytest.raises(TypeError):
        bool(_const("a", True))
