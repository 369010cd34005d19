import json
from pathlib import Path

import pytest

from services.exceptions import RulesetLoadError
from services.waste.model import (
    DirectAreaRules,
    DirectMapping,
    ExceptionArea,
    FlatEstateArea,
    ReferenceMarker,
)
from services.waste.parse import build_rule_store, load_rule_store


PROJECT_ROOT = Path(__file__).resolve().parents[3]


def test_area_variants_are_tagged(rule_store):
    kinds = [type(a.rules) for a in rule_store.areas]
    assert kinds == [DirectAreaRules, FlatEstateArea, ExceptionArea]
    assert rule_store.validity == "od 1. 1. 2026 do 31. 12. 2026"


def test_stream_schedules_are_tagged(rule_store):
    sko, plast, papir, sklo = rule_store.areas[0].rules.streams
    assert isinstance(sko.schedule, DirectMapping)
    assert isinstance(plast.schedule, ReferenceMarker)
    assert isinstance(papir.schedule, ReferenceMarker)
    assert sklo.schedule is None
    assert sko.schedule.days == (("Utery", ("Hlavní", "Myslivecká")), ("Streda", ("Polní",)))


def test_glass_group_note_falls_back_to_stream_note(rule_store):
    group = rule_store.areas[0].rules.streams[3].groups[0]
    assert group.weekday == "Pátek"
    assert group.weeks == (4, 8)
    assert group.note == "Jen čisté sklo"


def test_mixed_waste_lookup(rule_store):
    rules = rule_store.areas[0].rules
    assert rules.mixed_waste().label == "Směsný komunální odpad (SKO)"
    assert rules.mixed_waste().schedule.street_days() == {
        "Hlavní": "Utery", "Myslivecká": "Utery", "Polní": "Streda",
    }


def test_schedule_string_without_marker_is_no_schedule():
    store = build_rule_store({"oblasti": [{"nazev": "A", "typy_odpadu": [
        {"typ": "Plast", "rozpis_dle_dnu": "viz leták"},
    ]}]})
    assert store.areas[0].rules.streams[0].schedule is None


def test_exception_area_weekday_is_normalised_and_optional():
    store = build_rule_store({"oblasti": [
        {"nazev": "X", "cisla_popisna": [1, "2", "n/a"], "svozovy_den": "Patek"},
        {"nazev": "Y", "cisla_popisna": [3]},
    ]})
    x, y = store.areas
    assert x.rules.house_numbers == frozenset({1, 2})
    assert x.rules.weekday == "Pátek"
    assert y.rules.weekday is None


def test_area_with_nothing_becomes_empty_rules():
    store = build_rule_store({"oblasti": [{"nazev": "Prázdná"}]})
    assert store.areas[0].rules == DirectAreaRules()


@pytest.mark.parametrize("payload", [
    [],
    {"platnost": "2026"},
    {"oblasti": "nope"},
    {"oblasti": [{"typy_odpadu": []}]},
    {"oblasti": [{"nazev": "A", "typy_odpadu": [{"frekvence": "Sudé týdny"}]}]},
])
def test_malformed_payload_raises(payload):
    with pytest.raises(RulesetLoadError):
        build_rule_store(payload)


def test_load_rule_store_reads_wrapped_file(ruleset_file):
    store = load_rule_store(ruleset_file)
    assert [a.name for a in store.areas] == ["Mimo sídliště", "Sídliště", "Výjimky"]


def test_load_rule_store_missing_file(tmp_path):
    with pytest.raises(RulesetLoadError) as exc:
        load_rule_store(tmp_path / "missing.json")
    assert exc.value.path.endswith("missing.json")


def test_load_rule_store_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{\"oblasti\": [", encoding="utf-8")
    with pytest.raises(RulesetLoadError) as exc:
        load_rule_store(path)
    assert "Invalid JSON" in exc.value.message


def test_shipped_ruleset_loads():
    store = load_rule_store(PROJECT_ROOT / "data" / "waste.json")
    assert store.validity
    assert any(isinstance(a.rules, ExceptionArea) and 1710 in a.rules.house_numbers for a in store.areas)
    raw = json.loads((PROJECT_ROOT / "data" / "waste.json").read_text(encoding="utf-8"))
    assert len(store.areas) == len(raw["rozpis_svozu_odpadu"]["oblasti"])


def test_non_numeric_glass_weeks_are_skipped():
    store = build_rule_store({"oblasti": [{"nazev": "A", "typy_odpadu": [
        {"typ": "Sklo", "skupiny": [{"svozovy_den": "Patek", "tydny": ["x", 4, None], "ulice": ["Hlavní"]}]},
    ]}]})
    group = store.areas[0].rules.streams[0].groups[0]
    assert group.weeks == (4,)
    assert group.streets == ("Hlavní",)


def test_street_fields_that_are_not_lists_are_ignored():
    store = build_rule_store({"oblasti": [
        {"nazev": "S", "ulice": "Husova"},
        {"nazev": "G", "typy_odpadu": [
            {"typ": "Sklo", "skupiny": [{"svozovy_den": "Patek", "tydny": "4, 8", "ulice": "Hlavní"}]},
        ]},
        {"nazev": "X", "cisla_popisna": "1710"},
    ]})
    estate, glass, exception = store.areas
    assert estate.rules == FlatEstateArea(streets=())
    group = glass.rules.streams[0].groups[0]
    assert group.streets == ()
    assert group.weeks == ()
    assert exception.rules.house_numbers == frozenset()
