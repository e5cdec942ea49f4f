"""Bind error hierarchy.

Three error kinds, each with a stable ``code`` that the service layer
copies into ``ServiceError.code``:

- ``obj-type``: the target is not a mutable dataclass, or a field has an
  unsupported annotation.
- ``invalid-func``: validator metadata names an unknown predicate, has the
  wrong arity, or is malformed.
- ``invalid-param``: a value failed conversion or a predicate rejected it.
"""

from __future__ import annotations


class BindError(Exception):
    """Base class for all binder errors."""

    code: str = "bind-error"

    def __init__(self, message: str, *, field: str | None = None, key: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.key = key

    def located(self, *, field: str, key: str) -> BindError:
        """Attach the field/key that produced this error and return self."""
        if self.field is None:
            self.field = field
        if self.key is None:
            self.key = key
        return self

    def __str__(self) -> str:
        if self.field is None:
            return self.message
        return f"{self.message} (field={self.field!r}, key={self.key!r})"


class ObjTypeError(BindError):
    """Target is not a mutable dataclass (or a field type is unsupported)."""

    code = "obj-type"


class InvalidFuncError(BindError):
    """Validator metadata is unknown, has wrong arity, or is malformed."""

    code = "invalid-func"


class InvalidParamError(BindError):
    """Conversion failed or a validator predicate returned False."""

    code = "invalid-param"
