"""Tests for the format_result dispatcher and OutputSettings."""

import dataclasses
import json

import pytest

from parambind.output.formatters import OutputSettings, format_result
from parambind.services.result import ServiceError, ServiceResult


def _ok(op: str = "test", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "test", msg: str = "fail") -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code="invalid-param", message=msg),
    )


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False
        assert s.width == 120

    def test_frozen(self) -> None:
        s = OutputSettings(json_output=True)
        with pytest.raises(dataclasses.FrozenInstanceError):
            s.quiet = True  # type: ignore[misc]


class TestFormatResultJSON:
    def test_json_mode_returns_valid_json(self) -> None:
        result = _ok("bind", record="Sample")
        output = format_result(result, settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is True
        assert data["op"] == "bind"
        assert data["data"]["record"] == "Sample"

    def test_json_mode_error(self) -> None:
        output = format_result(_err("bind", "Bad"), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is False
        assert data["error"]["code"] == "invalid-param"
        assert data["error"]["message"] == "Bad"

    def test_json_wins_over_quiet(self) -> None:
        settings = OutputSettings(json_output=True, quiet=True)
        data = json.loads(format_result(_ok("plan"), settings=settings))
        assert data["op"] == "plan"


class TestFormatResultQuiet:
    def test_quiet_success(self) -> None:
        assert format_result(_ok("plan"), settings=OutputSettings(quiet=True)) == "OK: plan"

    def test_quiet_error(self) -> None:
        output = format_result(_err("bind", "nope"), settings=OutputSettings(quiet=True))
        assert output.startswith("ERROR: bind")
        assert "nope" in output


class TestFormatResultRich:
    def test_default_mode_is_rich(self) -> None:
        output = format_result(_ok("bind", record="Sample", values={"X": 5}))
        assert "OK" in output
        assert "record: Sample" in output
        assert "X: 5" in output
