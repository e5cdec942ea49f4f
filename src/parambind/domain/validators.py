"""Validator registry — named predicates dispatched by name.

A predicate is a plain function ``fn(value, *params) -> bool``. The first
argument is the converted field value; the remaining parameters are
declared with kind annotations so the plan compiler can coerce the
textual arguments found in field metadata once, ahead of any bind.

Predicates never raise on a value they cannot judge (``Range`` on a
string, ``Length`` on an int); they return False and the mismatch
surfaces as ``invalid-param`` at bind time.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, get_type_hints

from parambind.domain.errors import InvalidFuncError, InvalidParamError
from parambind.domain.kinds import Int64, Kind, resolve_kind

Predicate = Callable[..., bool]


@dataclass(frozen=True)
class Validator:
    """A registered predicate with its resolved parameter kinds."""

    name: str
    func: Predicate
    param_kinds: tuple[Kind, ...]

    @property
    def arity(self) -> int:
        return len(self.param_kinds)


def _param_kinds(name: str, func: Predicate) -> tuple[Kind, ...]:
    """Resolve the kinds of every parameter after the implicit value."""
    hints = get_type_hints(func, include_extras=True)
    params = list(inspect.signature(func).parameters.values())[1:]
    kinds: list[Kind] = []
    for param in params:
        kind = resolve_kind(hints.get(param.name))
        if kind is None:
            msg = f"Validator {name!r} parameter {param.name!r} has no supported kind"
            raise TypeError(msg)
        kinds.append(kind)
    return tuple(kinds)


class ValidatorRegistry:
    """Maps validator names to predicates.

    Usage::

        registry = ValidatorRegistry()

        @registry.register("Even")
        def even(value: object) -> bool:
            return isinstance(value, int) and value % 2 == 0
    """

    def __init__(self) -> None:
        self._validators: dict[str, Validator] = {}

    def register(self, name: str) -> Callable[[Predicate], Predicate]:
        """Decorator adding *func* under *name*."""

        def decorator(func: Predicate) -> Predicate:
            self._validators[name] = Validator(name, func, _param_kinds(name, func))
            return func

        return decorator

    def get(self, name: str) -> Validator:
        """Return the validator registered under *name*.

        Raises:
            InvalidFuncError: If *name* is not registered.
        """
        try:
            return self._validators[name]
        except KeyError:
            raise InvalidFuncError(f"Unknown validator: {name!r}") from None

    def signature(self, name: str) -> tuple[Kind, ...]:
        """Declared parameter kinds of *name*, excluding the value argument."""
        return self.get(name).param_kinds

    def call(self, name: str, value: Any, *params: Any) -> None:
        """Run the predicate *name* against *value*.

        Raises:
            InvalidFuncError: If *name* is not registered.
            InvalidParamError: If the predicate returns False.
        """
        validator = self.get(name)
        if not validator.func(value, *params):
            args = ",".join(str(p) for p in params)
            raise InvalidParamError(f"{value!r} failed {name}({args})")

    def names(self) -> list[str]:
        return sorted(self._validators)

    def __contains__(self, name: object) -> bool:
        return name in self._validators

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())


DEFAULT_REGISTRY = ValidatorRegistry()


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@DEFAULT_REGISTRY.register("Range")
def range_(value: Any, min: Int64, max: Int64) -> bool:  # noqa: A002
    """Integer value lies within ``[min, max]``."""
    return _is_int(value) and min <= value <= max


@DEFAULT_REGISTRY.register("Min")
def min_(value: Any, min: Int64) -> bool:  # noqa: A002
    """Integer value is at least *min*."""
    return _is_int(value) and value >= min


@DEFAULT_REGISTRY.register("Length")
def length(value: Any, min: int, max: int) -> bool:  # noqa: A002
    """String code-point count or list element count lies within ``[min, max]``."""
    if not isinstance(value, (str, list, tuple)):
        return False
    return min <= len(value) <= max
