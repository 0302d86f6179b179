"""Identity-keyed memoization for values handed out across re-renders."""

from __future__ import annotations

from typing import Any, Callable, Generic, Optional, Tuple, TypeVar

V = TypeVar("V")

_UNSET: Any = object()


class Memo(Generic[V]):
    """
    Hold a value until one of its dependencies changes identity.

    Dependencies are compared with ``is``, not ``==``.
    """

    def __init__(self) -> None:
        self._deps: Tuple[Any, ...] = ()
        self._value: Any = _UNSET

    def get(self, factory: Callable[[], V], deps: Tuple[Any, ...]) -> V:
        if self._value is _UNSET or not self._same(deps):
            self._value = factory()
            self._deps = deps
        return self._value

    def _same(self, deps: Tuple[Any, ...]) -> bool:
        return len(deps) == len(self._deps) and all(
            new is old for new, old in zip(deps, self._deps)
        )

    def clear(self) -> None:
        self._deps = ()
        self._value = _UNSET

    @property
    def value(self) -> Optional[V]:
        return None if self._value is _UNSET else self._value
