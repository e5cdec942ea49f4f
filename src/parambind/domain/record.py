"""Record declaration helpers.

``@record`` is ``@dataclass`` with one addition: every field that has no
initial value starts at its kind's zero value, so a record can always be
instantiated with no arguments and then bound into.

``param()`` attaches binding metadata to a field::

    @record
    class Query:
        page: Int32 = param("p;Min(1)", default="1")
        tags: list[str] = param("tag", default="-")
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
from collections.abc import Callable
from typing import Any, ClassVar, get_origin, get_type_hints, overload

from parambind.domain.errors import ObjTypeError
from parambind.domain.kinds import resolve_kind, zero_value
from parambind.domain.plan import DEFAULT_KEY, PARAMS_KEY


def param(
    spec: str = "",
    *,
    default: str | None = None,
    value: Any = dataclasses.MISSING,
    factory: Any = dataclasses.MISSING,
) -> Any:
    """Declare a bound field.

    Args:
        spec: ``"<key>[;Validator(arg,...)]*"``; an empty key uses the field name.
        default: Literal substituted on failure, ``"-"`` to leave the field
            untouched, or None to propagate the error.
        value: Initial attribute value of new instances.
        factory: Zero-argument callable producing the initial value.
    """
    metadata: dict[str, str] = {PARAMS_KEY: spec}
    if default is not None:
        metadata[DEFAULT_KEY] = default
    return dataclasses.field(default=value, default_factory=factory, metadata=metadata)


def _is_field_annotation(hint: Any) -> bool:
    return get_origin(hint) is not ClassVar and not isinstance(hint, dataclasses.InitVar)


def _fill_zero_values(cls: type) -> None:
    try:
        hints = get_type_hints(cls, include_extras=True)
    except NameError as exc:
        msg = f"Cannot resolve annotations of {cls.__name__}: {exc}"
        raise ObjTypeError(msg) from exc

    for name in inspect.get_annotations(cls):
        hint = hints.get(name)
        if hint is None or not _is_field_annotation(hint):
            continue
        kind = resolve_kind(hint)
        if kind is None:
            raise ObjTypeError(f"Unsupported field type {hint!r}", field=name)

        current = cls.__dict__.get(name, dataclasses.MISSING)
        zero = functools.partial(zero_value, kind)
        if current is dataclasses.MISSING:
            setattr(cls, name, dataclasses.field(default_factory=zero))
        elif (
            isinstance(current, dataclasses.Field)
            and current.default is dataclasses.MISSING
            and current.default_factory is dataclasses.MISSING
        ):
            current.default_factory = zero


@overload
def record(cls: type, /) -> type: ...


@overload
def record(cls: None = None, /, **kwargs: Any) -> Callable[[type], type]: ...


def record(cls: type | None = None, /, **kwargs: Any) -> Any:
    """Class decorator: a dataclass whose fields default to zero values.

    Accepts the same keyword arguments as :func:`dataclasses.dataclass`.
    """

    def wrap(target: type) -> type:
        _fill_zero_values(target)
        return dataclasses.dataclass(target, **kwargs)

    if cls is None:
        return wrap
    return wrap(cls)
