"""BindService — resolve record targets, describe plans, bind query strings.

Targets are ``module:Qualified.Name`` strings naming a dataclass record.
Query strings are decoded with :func:`urllib.parse.parse_qs` according to
the ``[query]`` settings before being handed to the binder.
"""

from __future__ import annotations

import dataclasses
import importlib
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qs

from parambind.binder import Binder
from parambind.domain.errors import BindError
from parambind.domain.plan import DefaultMode, FieldPlan
from parambind.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from parambind.config.settings import ParamBindSettings

logger = logging.getLogger(__name__)


class TargetError(ValueError):
    """A ``module:Class`` target cannot be imported or resolved."""


def load_record_type(target: str) -> type:
    """Import the object named by ``module:Qualified.Name``.

    Raises:
        TargetError: Malformed target, import failure, or missing attribute.
    """
    module_name, sep, qualname = target.partition(":")
    if not sep or not module_name or not qualname:
        raise TargetError(f"Target must look like 'module:Class', got {target!r}")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise TargetError(f"Cannot import module {module_name!r}: {exc}") from exc
    for attr in qualname.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError:
            raise TargetError(f"{module_name!r} has no attribute {qualname!r}") from None
    return obj


def describe_field(field_plan: FieldPlan) -> dict[str, Any]:
    """Plain-data view of one plan entry."""
    default: Any = None
    if field_plan.default_mode is DefaultMode.OMIT:
        default = "-"
    elif field_plan.default_mode is DefaultMode.VALUE:
        default = field_plan.fresh_default()
    return {
        "name": field_plan.name,
        "key": field_plan.key,
        "kind": str(field_plan.kind),
        "validators": [str(call) for call in field_plan.validators],
        "default_mode": str(field_plan.default_mode),
        "default": default,
    }


class BindService:
    """Binder operations for the CLI, returning ServiceResult."""

    def __init__(self, settings: ParamBindSettings, binder: Binder | None = None) -> None:
        self._settings = settings
        self._binder = binder if binder is not None else Binder()

    @property
    def binder(self) -> Binder:
        return self._binder

    def _target_error(self, op: str, exc: TargetError) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code="BAD_TARGET", message=str(exc)),
        )

    def preload(self) -> ServiceResult:
        """Register every ``[binder].preload`` target, stopping at the first failure."""
        registered: list[str] = []
        for target in self._settings.binder.preload:
            try:
                self._binder.register(load_record_type(target))
            except TargetError as exc:
                return self._target_error("preload", exc)
            except BindError as exc:
                return ServiceResult(
                    ok=False,
                    op="preload",
                    error=ServiceError.from_bind_error(exc),
                    data={"registered": registered, "failed": target},
                )
            registered.append(target)
        logger.debug("Preloaded %d record type(s)", len(registered))
        return ServiceResult(ok=True, op="preload", data={"registered": registered})

    def plan(self, target: str) -> ServiceResult:
        """Compile (or fetch) the plan for *target* and describe it."""
        try:
            record_type = load_record_type(target)
            plan = self._binder.plan_for(record_type)
        except TargetError as exc:
            return self._target_error("plan", exc)
        except BindError as exc:
            return ServiceResult(ok=False, op="plan", error=ServiceError.from_bind_error(exc))
        return ServiceResult(
            ok=True,
            op="plan",
            data={
                "record": record_type.__qualname__,
                "fields": [describe_field(f) for f in plan.fields],
            },
        )

    def bind(self, target: str, query: str) -> ServiceResult:
        """Decode *query* and bind it into a fresh instance of *target*."""
        try:
            record_type = load_record_type(target)
        except TargetError as exc:
            return self._target_error("bind", exc)

        try:
            values = parse_qs(query, **self._settings.query.parse_qs_options())
        except ValueError as exc:
            return ServiceResult(
                ok=False,
                op="bind",
                error=ServiceError(code="BAD_QUERY", message=str(exc)),
            )

        try:
            plan = self._binder.plan_for(record_type)
            instance = record_type()
            self._binder.bind(instance, values)
        except BindError as exc:
            return ServiceResult(ok=False, op="bind", error=ServiceError.from_bind_error(exc))
        except TypeError as exc:
            return ServiceResult(
                ok=False,
                op="bind",
                error=ServiceError(
                    code="obj-type", message=f"Cannot instantiate {target!r}: {exc}"
                ),
            )

        unused = sorted(set(values) - {f.key for f in plan.fields})
        warnings = [f"Unused query key: {key}" for key in unused]
        return ServiceResult(
            ok=True,
            op="bind",
            data={"record": record_type.__qualname__, "values": dataclasses.asdict(instance)},
            warnings=warnings,
        )
