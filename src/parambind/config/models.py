"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, parambind.toml only contains
overrides. An empty file (or none at all) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class BinderConfig(BaseModel):
    """[binder] section."""

    model_config = {"frozen": True}

    # ``module:Class`` targets registered eagerly before any command runs.
    preload: list[str] = Field(default_factory=list)


class QueryConfig(BaseModel):
    """[query] section — options for decoding query strings on the CLI."""

    model_config = {"frozen": True}

    keep_blank_values: bool = True
    strict_parsing: bool = False

    def parse_qs_options(self) -> dict[str, bool]:
        """Keyword arguments for :func:`urllib.parse.parse_qs`."""
        return {
            "keep_blank_values": self.keep_blank_values,
            "strict_parsing": self.strict_parsing,
        }


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    width: int = Field(default=120, ge=40)


class ParamBindConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    binder: BinderConfig = Field(default_factory=BinderConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
