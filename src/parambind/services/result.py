"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer methods return ServiceResult.
Bind errors are translated here so the CLI never sees an exception
from the binder; ``ServiceError.code`` carries the error kind
(``obj-type``, ``invalid-func``, ``invalid-param``) or a service code.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from parambind.domain.errors import BindError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_bind_error(cls, exc: BindError) -> ServiceError:
        """Translate a binder exception, keeping its field/key location."""
        detail = {k: v for k, v in (("field", exc.field), ("key", exc.key)) if v is not None}
        return cls(code=exc.code, message=exc.message, detail=detail)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"bind"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
