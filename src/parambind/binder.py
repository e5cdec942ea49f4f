"""Binder — populate records from decoded request parameters.

The binder owns a per-instance plan cache. Lookups read published plans
without locking; compilation holds an exclusive lock for
compile-and-insert and re-checks the cache first, so concurrent first
binds of one type never observe a half-built plan.

INVARIANT: a field is either written with its final value (converted or
default) or left untouched. Fields are processed in declaration order and
the first unrecovered error aborts the bind.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from parambind.domain.convert import convert
from parambind.domain.errors import BindError, ObjTypeError
from parambind.domain.plan import DefaultMode, FieldPlan, RecordPlan, compile_plan
from parambind.domain.validators import DEFAULT_REGISTRY, ValidatorRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")

Values = Mapping[str, Sequence[str] | str]


def first_value(values: Values, key: str) -> str:
    """Return the first value for *key*; absent keys and empty lists give ``""``."""
    found = values.get(key)
    if found is None:
        return ""
    if isinstance(found, str):
        return found
    return found[0] if found else ""


class Binder:
    """Declarative request-parameter binder.

    Usage::

        binder = Binder()
        query = binder.bind(Query(), {"p": ["2"], "tag": ["a,b"]})
    """

    def __init__(self, registry: ValidatorRegistry | None = None) -> None:
        self._registry = registry if registry is not None else DEFAULT_REGISTRY
        self._plans: dict[type, RecordPlan] = {}
        self._lock = threading.Lock()

    @property
    def registry(self) -> ValidatorRegistry:
        return self._registry

    def plan_for(self, record_type: type) -> RecordPlan:
        """Return the cached plan for *record_type*, compiling it on first use."""
        if not isinstance(record_type, type):
            raise ObjTypeError(f"Expected a dataclass type, got {record_type!r}")
        plan = self._plans.get(record_type)
        if plan is not None:
            return plan
        with self._lock:
            plan = self._plans.get(record_type)
            if plan is None:
                plan = compile_plan(record_type, self._registry)
                self._plans[record_type] = plan
        return plan

    def is_registered(self, record_type: type) -> bool:
        return record_type in self._plans

    def register(self, *record_types: type) -> None:
        """Eagerly compile plans, raising the first compilation error."""
        for record_type in record_types:
            self.plan_for(record_type)

    def bind(self, record: T, values: Values) -> T:
        """Populate *record* from *values* and return it.

        Raises:
            ObjTypeError: *record* is not an instance of a mutable dataclass.
            InvalidFuncError: The record's validator metadata is invalid.
            InvalidParamError: A field without a default failed conversion
                or validation. Earlier fields remain written.
        """
        if isinstance(record, type) or not dataclasses.is_dataclass(record):
            raise ObjTypeError(f"Expected a dataclass instance, got {record!r}")
        plan = self.plan_for(type(record))
        for field_plan in plan.fields:
            self._bind_field(record, field_plan, first_value(values, field_plan.key))
        return record

    def _bind_field(self, record: Any, field_plan: FieldPlan, text: str) -> None:
        try:
            value = convert(text, field_plan.kind)
            for call in field_plan.validators:
                self._registry.call(call.name, value, *call.params)
        except BindError as exc:
            if field_plan.default_mode is DefaultMode.NONE:
                exc.located(field=field_plan.name, key=field_plan.key)
                raise
            logger.debug(
                "Field %s (key=%s) recovered via default mode %s: %s",
                field_plan.name,
                field_plan.key,
                field_plan.default_mode,
                exc.code,
                extra={
                    "field": field_plan.name,
                    "key": field_plan.key,
                    "default_mode": str(field_plan.default_mode),
                    "code": exc.code,
                },
            )
            if field_plan.default_mode is DefaultMode.VALUE:
                setattr(record, field_plan.name, field_plan.fresh_default())
            return
        setattr(record, field_plan.name, value)


def new(registry: ValidatorRegistry | None = None) -> Binder:
    """Return a fresh binder with an empty plan cache."""
    return Binder(registry)
