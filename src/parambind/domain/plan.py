"""Plan compiler — turn a record type into an ordered field plan.

Each dataclass field contributes one :class:`FieldPlan`, in declaration
order. Field metadata drives the plan:

- ``params``: ``"<key>[;Validator(arg,...)]*"``. An empty key means the
  field's attribute name.
- ``default``: absent or empty propagates errors, ``"-"`` leaves the field
  untouched on failure, anything else is a literal converted once here.

INVARIANT: a compiled plan is immutable. Every default is already
converted and every validator argument already coerced.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, get_type_hints

from parambind.domain.convert import convert
from parambind.domain.errors import BindError, InvalidFuncError, InvalidParamError, ObjTypeError
from parambind.domain.kinds import LIST_KINDS, Kind, resolve_kind
from parambind.domain.validators import ValidatorRegistry

logger = logging.getLogger(__name__)

PARAMS_KEY = "params"
DEFAULT_KEY = "default"
OMIT = "-"
SEGMENT_SEPARATOR = ";"


class DefaultMode(StrEnum):
    """What to do when a field fails conversion or validation."""

    NONE = "none"
    OMIT = "omit"
    VALUE = "value"


@dataclass(frozen=True)
class ValidatorCall:
    """A validator name plus its pre-coerced arguments."""

    name: str
    params: tuple[Any, ...] = ()

    def __str__(self) -> str:
        return f"{self.name}({','.join(str(p) for p in self.params)})"


@dataclass(frozen=True)
class FieldPlan:
    """Compiled binding instructions for one record field."""

    name: str
    key: str
    kind: Kind
    validators: tuple[ValidatorCall, ...] = ()
    default_mode: DefaultMode = DefaultMode.NONE
    default_value: Any = None

    def fresh_default(self) -> Any:
        """Return the default value, copying sequences so records never share one."""
        if self.kind in LIST_KINDS:
            return list(self.default_value)
        return self.default_value


@dataclass(frozen=True)
class RecordPlan:
    """The ordered field plan for one record type."""

    record_type: type
    fields: tuple[FieldPlan, ...]

    def __len__(self) -> int:
        return len(self.fields)


def check_record_type(record_type: Any) -> None:
    """Require a non-frozen dataclass type.

    Raises:
        ObjTypeError: If *record_type* cannot be bound into.
    """
    if not isinstance(record_type, type) or not dataclasses.is_dataclass(record_type):
        raise ObjTypeError(f"Expected a dataclass type, got {record_type!r}")
    if record_type.__dataclass_params__.frozen:  # type: ignore[attr-defined]
        raise ObjTypeError(f"Record {record_type.__name__} is frozen and cannot be bound")


def _coerce_arg(text: str, kind: Kind, name: str) -> Any:
    if kind is Kind.STRING:
        return text
    try:
        return convert(text, kind)
    except InvalidParamError as exc:
        raise InvalidFuncError(f"Bad argument {text!r} for {name}: {exc.message}") from exc


def parse_validator(segment: str, registry: ValidatorRegistry) -> ValidatorCall:
    """Parse ``Name(arg1,arg2,...)`` against *registry*.

    Raises:
        InvalidFuncError: Unknown name, wrong arity, malformed syntax, or an
            argument that does not coerce to the declared parameter kind.
    """
    text = segment.strip()
    start = text.find("(")
    if start == -1:
        raise InvalidFuncError(f"Malformed validator {text!r}: missing '('")
    name = text[:start].strip()
    kinds = registry.signature(name)
    end = text.find(")", start)
    if end == -1:
        raise InvalidFuncError(f"Malformed validator {text!r}: missing ')'")

    raw = text[start + 1 : end]
    args = [arg.strip() for arg in raw.split(",")] if raw.strip() else []
    if len(args) != len(kinds):
        raise InvalidFuncError(
            f"{name} takes {len(kinds)} argument(s), got {len(args)} in {text!r}"
        )
    params = tuple(
        _coerce_arg(arg, kind, name) for arg, kind in zip(args, kinds, strict=True)
    )
    return ValidatorCall(name=name, params=params)


def _parse_default(literal: str | None, kind: Kind) -> tuple[DefaultMode, Any]:
    if not literal:
        return DefaultMode.NONE, None
    if literal == OMIT:
        return DefaultMode.OMIT, None
    value = convert(literal, kind)
    if kind in LIST_KINDS:
        value = tuple(value)
    return DefaultMode.VALUE, value


def compile_field(
    field: dataclasses.Field[Any], annotation: Any, registry: ValidatorRegistry
) -> FieldPlan:
    """Compile one dataclass field into a :class:`FieldPlan`."""
    segments = str(field.metadata.get(PARAMS_KEY, "")).split(SEGMENT_SEPARATOR)
    key = segments[0] or field.name
    try:
        kind = resolve_kind(annotation)
        if kind is None:
            raise ObjTypeError(f"Unsupported field type {annotation!r}")
        validators = tuple(
            parse_validator(segment, registry) for segment in segments[1:] if segment.strip()
        )
        mode, default = _parse_default(field.metadata.get(DEFAULT_KEY), kind)
    except BindError as exc:
        exc.located(field=field.name, key=key)
        raise
    return FieldPlan(
        name=field.name,
        key=key,
        kind=kind,
        validators=validators,
        default_mode=mode,
        default_value=default,
    )


def compile_plan(record_type: type, registry: ValidatorRegistry) -> RecordPlan:
    """Compile the field plan for *record_type*.

    Raises:
        ObjTypeError: Not a mutable dataclass, or a field type is unsupported.
        InvalidFuncError: Validator metadata is invalid.
        InvalidParamError: A default literal does not convert to its field's kind.
    """
    check_record_type(record_type)
    try:
        hints = get_type_hints(record_type, include_extras=True)
    except NameError as exc:
        msg = f"Cannot resolve annotations of {record_type.__name__}: {exc}"
        raise ObjTypeError(msg) from exc

    fields = tuple(
        compile_field(field, hints.get(field.name, field.type), registry)
        for field in dataclasses.fields(record_type)
    )
    logger.debug("Compiled plan for %s (%d fields)", record_type.__qualname__, len(fields))
    return RecordPlan(record_type=record_type, fields=fields)
