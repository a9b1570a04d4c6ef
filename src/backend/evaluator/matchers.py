from __future__ import annotations

from typing import Callable


class RuleMatcher:
    """A named condition used inside rule logic.

    The description names the condition for logs and traces; `matches()` evaluates it against the current state of
    its inputs. Matchers compose with `all_of`, `any_of`, `none_of` and `not_`, or with `&`, `|` and `~`.
    """

    __slots__ = ("description", "_predicate")

    def __init__(self, description: str, predicate: Callable[[], bool]):
        self.description = description
        self._predicate = predicate

    def matches(self) -> bool:
        return bool(self._predicate())

    def __and__(self, other: "RuleMatcher") -> "RuleMatcher":
        return all_of(self, other)

    def __or__(self, other: "RuleMatcher") -> "RuleMatcher":
        return any_of(self, other)

    def __invert__(self) -> "RuleMatcher":
        return not_(self)

    def __bool__(self) -> bool:
        # `if matcher:` would silently be true; callers must ask explicitly.
        raise TypeError(f"Call matches() to evaluate {self.description}")

    def __repr__(self) -> str:
        return f"RuleMatcher({self.description!r})"


def all_of(*matchers: RuleMatcher) -> RuleMatcher:
    return RuleMatcher(
        f"all_of({_describe(matchers)})",
        lambda: all(m.matches() for m in matchers),
    )


def any_of(*matchers: RuleMatcher) -> RuleMatcher:
    return RuleMatcher(
        f"any_of({_describe(matchers)})",
        lambda: any(m.matches() for m in matchers),
    )


def none_of(*matchers: RuleMatcher) -> RuleMatcher:
    return RuleMatcher(
        f"none_of({_describe(matchers)})",
        lambda: not any(m.matches() for m in matchers),
    )


def not_(matcher: RuleMatcher) -> RuleMatcher:
    return RuleMatcher(f"not({matcher.description})", lambda: not matcher.matches())


def _describe(matchers: tuple[RuleMatcher, ...]) -> str:
    return ", ".join(m.description for m in matchers)
