"""Tests for the Binder: scenarios, default policies, and the plan cache."""

from __future__ import annotations

import dataclasses
import threading
from typing import Any

import pytest

import parambind.binder as binder_module
from parambind import Binder, InvalidFuncError, InvalidParamError, ObjTypeError, new
from parambind.binder import first_value
from parambind.domain.plan import compile_plan
from tests.records import (
    Bogus,
    FrozenRecord,
    NotARecord,
    Omitting,
    Ordered,
    Sample,
    ShortName,
    Strict,
    Tagged,
    Unsigned,
)


def _query(**values: str) -> dict[str, list[str]]:
    return {k: [v] for k, v in values.items()}


SCENARIO_1 = _query(
    aaa="11", data64="33", B="32", sss="aaa", iii="1,2,3", ttt="a,b,c", bbb="true", ccc="1.2"
)
SCENARIO_2 = _query(
    aaa="5", data64="10", B="32", sss="aaa", iii="1,2,3", ttt="a", bbb="true", ccc="1.2"
)


class TestScenarios:
    def test_out_of_range_values_fall_back_to_defaults(self, binder: Binder) -> None:
        s = binder.bind(Sample(), SCENARIO_1)
        assert s.A == 10
        assert s.B == 32
        assert s.C == 20
        assert s.F == pytest.approx(1.2, rel=1e-6)
        assert s.S == "aaa"
        assert s.LI == [1, 2, 3]
        assert s.LS == ["a", "b", "c"]
        assert s.Bo is True

    def test_in_range_values_are_kept(self, binder: Binder) -> None:
        s = binder.bind(Sample(), SCENARIO_2)
        assert (s.A, s.B, s.C, s.S, s.LI, s.LS, s.Bo) == (
            5,
            32,
            10,
            "aaa",
            [1, 2, 3],
            ["a"],
            True,
        )
        assert s.F == pytest.approx(1.2, rel=1e-6)

    def test_no_default_propagates(self, binder: Binder) -> None:
        r = Strict()
        with pytest.raises(InvalidParamError) as excinfo:
            binder.bind(r, _query(x="50"))
        assert excinfo.value.code == "invalid-param"
        assert excinfo.value.field == "X"
        assert excinfo.value.key == "x"
        assert r.X == 0

    def test_omit_preserves_previous_value(self, binder: Binder) -> None:
        r = Omitting(X=7)
        binder.bind(r, _query(x="50"))
        assert r.X == 7

    def test_length_counts_code_points(self, binder: Binder) -> None:
        with pytest.raises(InvalidParamError):
            binder.bind(ShortName(), _query(x="héllo"))
        assert binder.bind(ShortName(), _query(x="héll")).X == "héll"

    def test_unknown_validator_fails_register(self, binder: Binder) -> None:
        with pytest.raises(InvalidFuncError) as excinfo:
            binder.register(Bogus)
        assert excinfo.value.code == "invalid-func"

    def test_unknown_validator_fails_bind(self, binder: Binder) -> None:
        r = Bogus()
        with pytest.raises(InvalidFuncError):
            binder.bind(r, _query(x="1"))
        assert r.X == 0


class TestDefaultPolicies:
    @pytest.mark.parametrize("bad", ["0", "11", "abc", ""])
    def test_value_default_written_on_failure(self, binder: Binder, bad: str) -> None:
        s = binder.bind(Sample(A=3), {**SCENARIO_2, "aaa": [bad]})
        assert s.A == 10

    @pytest.mark.parametrize("bad", ["0", "11", "x", ""])
    def test_omit_keeps_pre_call_value(self, binder: Binder, bad: str) -> None:
        r = Omitting(X=4)
        binder.bind(r, _query(x=bad))
        assert r.X == 4

    def test_absent_key_with_omit(self, binder: Binder) -> None:
        r = Omitting(X=9)
        binder.bind(r, {})
        assert r.X == 9

    def test_absent_string_key_with_omit(self, binder: Binder) -> None:
        query = {k: v for k, v in SCENARIO_2.items() if k != "sss"}
        s = binder.bind(Sample(S="keep"), query)
        assert s.S == "keep"

    def test_oversized_literal_recovers_via_omit(self, binder: Binder) -> None:
        r = binder.bind(Omitting(X=7), _query(x="9" * 5000))
        assert r.X == 7

    def test_oversized_list_element_recovers_via_omit(self, binder: Binder) -> None:
        r = binder.bind(Tagged(ids=[4]), _query(tag="a", id="1," + "9" * 5000))
        assert r.tags == ["a"]
        assert r.ids == [4]

    def test_oversized_literal_recovers_via_value(self, binder: Binder) -> None:
        s = binder.bind(Sample(), {**SCENARIO_2, "aaa": ["9" * 5000]})
        assert s.A == 10

    def test_list_default_written_fresh(self, binder: Binder) -> None:
        a = binder.bind(Tagged(), _query(tag="a,b,c,d"))
        b = binder.bind(Tagged(), _query(tag="a,b,c,d"))
        assert a.tags == ["x", "y"]
        assert a.tags is not b.tags
        a.tags.append("z")
        assert binder.plan_for(Tagged).fields[0].default_value == ("x", "y")

    def test_list_validator_boundaries(self, binder: Binder) -> None:
        assert binder.bind(Tagged(), _query(tag="a")).tags == ["a"]
        assert binder.bind(Tagged(), _query(tag="a,b,c")).tags == ["a", "b", "c"]
        assert binder.bind(Tagged(), _query(tag="a,b,c,d")).tags == ["x", "y"]

    def test_int_list_with_empty_segment_omitted(self, binder: Binder) -> None:
        r = Tagged(ids=[5])
        binder.bind(r, _query(tag="a", id="1,,3"))
        assert r.ids == [5]

    def test_string_list_with_empty_segment(self, binder: Binder) -> None:
        r = binder.bind(Tagged(), _query(tag="1,,3"))
        assert r.tags == ["1", "", "3"]


class TestAbort:
    def test_earlier_fields_stay_written(self, binder: Binder) -> None:
        r = Ordered()
        with pytest.raises(InvalidParamError) as excinfo:
            binder.bind(r, _query(a="1", b="oops", c="3"))
        assert excinfo.value.field == "second"
        assert (r.first, r.second, r.third) == (1, 0, 0)

    def test_missing_required_key(self, binder: Binder) -> None:
        with pytest.raises(InvalidParamError):
            binder.bind(Ordered(), _query(a="1", b="2"))

    def test_oversized_literal_without_default(self, binder: Binder) -> None:
        with pytest.raises(InvalidParamError) as excinfo:
            binder.bind(Strict(), _query(x="9" * 5000))
        assert excinfo.value.key == "x"

    def test_unsigned_out_of_range(self, binder: Binder) -> None:
        with pytest.raises(InvalidParamError):
            binder.bind(Unsigned(), _query(s="256"))
        assert binder.bind(Unsigned(), _query(s="255")).small == 255


class TestInputMapping:
    def test_first_value_only(self, binder: Binder) -> None:
        r = binder.bind(Ordered(), {"a": ["1", "100"], "b": ["2"], "c": ["3", "x"]})
        assert (r.first, r.second, r.third) == (1, 2, 3)

    def test_plain_string_values(self, binder: Binder) -> None:
        r = binder.bind(Ordered(), {"a": "1", "b": "2", "c": "3"})
        assert (r.first, r.second, r.third) == (1, 2, 3)

    @pytest.mark.parametrize(
        "values,expected",
        [({}, ""), ({"k": []}, ""), ({"k": [""]}, ""), ({"k": ["v", "w"]}, "v"), ({"k": "s"}, "s")],
    )
    def test_first_value(self, values: dict[str, Any], expected: str) -> None:
        assert first_value(values, "k") == expected

    def test_returns_same_instance(self, binder: Binder) -> None:
        r = Ordered()
        assert binder.bind(r, _query(a="1", b="2", c="3")) is r

    def test_deterministic(self, binder: Binder) -> None:
        a = binder.bind(Sample(), SCENARIO_1)
        b = binder.bind(Sample(), SCENARIO_1)
        assert dataclasses.asdict(a) == dataclasses.asdict(b)


class TestObjType:
    @pytest.mark.parametrize("target", [Sample, NotARecord(), 3, {"a": 1}, None])
    def test_rejects_non_instances(self, binder: Binder, target: object) -> None:
        with pytest.raises(ObjTypeError) as excinfo:
            binder.bind(target, {})
        assert excinfo.value.code == "obj-type"

    def test_rejects_frozen_instance(self, binder: Binder) -> None:
        with pytest.raises(ObjTypeError):
            binder.bind(FrozenRecord(), {"x": ["1"]})

    def test_register_rejects_instances(self, binder: Binder) -> None:
        with pytest.raises(ObjTypeError):
            binder.register(Sample())  # type: ignore[arg-type]


class TestPlanCache:
    def test_new_returns_empty_cache(self) -> None:
        b = new()
        assert isinstance(b, Binder)
        assert not b.is_registered(Sample)

    def test_register_populates_cache(self, binder: Binder) -> None:
        binder.register(Sample, Strict)
        assert binder.is_registered(Sample)
        assert binder.is_registered(Strict)

    def test_register_stops_at_first_error(self, binder: Binder) -> None:
        with pytest.raises(InvalidFuncError):
            binder.register(Strict, Bogus, Omitting)
        assert binder.is_registered(Strict)
        assert not binder.is_registered(Omitting)

    def test_bind_compiles_lazily_once(self, binder: Binder) -> None:
        binder.bind(Ordered(), _query(a="1", b="2", c="3"))
        plan = binder.plan_for(Ordered)
        binder.bind(Ordered(), _query(a="1", b="2", c="3"))
        assert binder.plan_for(Ordered) is plan

    def test_binders_do_not_share_caches(self) -> None:
        a, b = Binder(), Binder()
        a.register(Sample)
        assert not b.is_registered(Sample)

    def test_concurrent_first_binds(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[type] = []

        def counting_compile(record_type: type, registry: Any) -> Any:
            calls.append(record_type)
            return compile_plan(record_type, registry)

        monkeypatch.setattr(binder_module, "compile_plan", counting_compile)
        binder = Binder()
        start = threading.Barrier(8)
        results: list[dict[str, Any]] = []
        errors: list[BaseException] = []
        lock = threading.Lock()

        def worker() -> None:
            start.wait()
            try:
                record = binder.bind(Sample(), SCENARIO_1)
            except BaseException as exc:  # noqa: BLE001
                with lock:
                    errors.append(exc)
                return
            with lock:
                results.append(dataclasses.asdict(record))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(results) == 8
        assert all(r == results[0] for r in results)
        assert calls == [Sample]
