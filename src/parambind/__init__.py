"""parambind — declarative request-parameter binding for dataclasses."""

from parambind.binder import Binder, new
from parambind.domain.errors import BindError, InvalidFuncError, InvalidParamError, ObjTypeError
from parambind.domain.kinds import (
    Float32,
    Float64,
    Int,
    Int8,
    Int16,
    Int32,
    Int64,
    Kind,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
)
from parambind.domain.record import param, record

__version__ = "0.1.0"

__all__ = [
    "BindError",
    "Binder",
    "Float32",
    "Float64",
    "Int",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "InvalidFuncError",
    "InvalidParamError",
    "Kind",
    "ObjTypeError",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "__version__",
    "new",
    "param",
    "record",
]
