# services/waste/parse.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple

from services.exceptions import RulesetLoadError
from .model import (
    Area,
    AreaRules,
    DirectAreaRules,
    DirectMapping,
    ExceptionArea,
    FlatEstateArea,
    GlassGroup,
    ReferenceMarker,
    RuleStore,
    Schedule,
    WasteStreamRule,
)
from .policy import normalize_day


logger = logging.getLogger(__name__)

WRAPPER_KEY = "rozpis_svozu_odpadu"
REFERENCE_MARKER = "Stejný rozpis"


def load_rule_store(path: str | Path) -> RuleStore:
    """Read the ruleset JSON file and build the RuleStore."""
    p = Path(path)
    try:
        payload = json.loads(p.read_text(encoding="utf-8"))
    except OSError as e:
        raise RulesetLoadError(f"Unable to read ruleset {p}: {e}", path=str(p)) from e
    except json.JSONDecodeError as e:
        raise RulesetLoadError(
            f"Invalid JSON in ruleset {p}: line {e.lineno}, column {e.colno}: {e.msg}", path=str(p)
        ) from e

    store = build_rule_store(payload)
    logger.info("Loaded %d areas from %s", len(store.areas), p)
    return store


def build_rule_store(payload: Any) -> RuleStore:
    if isinstance(payload, dict) and isinstance(payload.get(WRAPPER_KEY), dict):
        payload = payload[WRAPPER_KEY]
    if not isinstance(payload, dict) or not isinstance(payload.get("oblasti"), list):
        raise RulesetLoadError("Ruleset must be an object with an 'oblasti' list")

    areas = tuple(_parse_area(raw, idx) for idx, raw in enumerate(payload["oblasti"]))
    return RuleStore(validity=str(payload.get("platnost") or ""), areas=areas)


def _parse_area(raw: Any, idx: int) -> Area:
    if not isinstance(raw, dict) or not raw.get("nazev"):
        raise RulesetLoadError(f"Area #{idx} has no 'nazev'")
    name = str(raw["nazev"])

    rules: AreaRules
    if raw.get("typy_odpadu") is not None:
        streams = tuple(_parse_stream(s, name) for s in raw["typy_odpadu"])
        rules = DirectAreaRules(streams=streams)
    elif raw.get("ulice") is not None:
        rules = FlatEstateArea(
            streets=_str_tuple(raw["ulice"], f"streets of area {name!r}"),
            weekday=_weekday_or_none(raw.get("svozovy_den")),
            rule_text=raw.get("pravidlo"),
        )
    elif raw.get("cisla_popisna") is not None:
        rules = ExceptionArea(
            house_numbers=frozenset(_int_list(raw["cisla_popisna"], f"house numbers of area {name!r}")),
            weekday=_weekday_or_none(raw.get("svozovy_den")),
            description=raw.get("popis"),
        )
    else:
        logger.warning("Area %r has no streams, streets or house numbers", name)
        rules = DirectAreaRules()
    return Area(name=name, rules=rules)


def _parse_stream(raw: Any, area_name: str) -> WasteStreamRule:
    if not isinstance(raw, dict) or not raw.get("typ"):
        raise RulesetLoadError(f"Waste stream without 'typ' in area {area_name!r}")
    note = raw.get("poznamka")
    groups = tuple(_parse_group(g, note) for g in (raw.get("skupiny") or []))
    return WasteStreamRule(
        label=str(raw["typ"]),
        frequency=raw.get("frekvence"),
        schedule=_parse_schedule(raw.get("rozpis_dle_dnu"), raw["typ"], area_name),
        groups=groups,
        note=note,
    )


def _parse_schedule(raw: Any, label: str, area_name: str) -> Schedule:
    if isinstance(raw, dict):
        days = []
        for day_key, streets in raw.items():
            if not isinstance(streets, list):
                logger.warning("Skipping %s/%s day %r: streets are not a list", area_name, label, day_key)
                continue
            days.append((str(day_key), _str_tuple(streets, f"{area_name}/{label} day {day_key!r}")))
        return DirectMapping(days=tuple(days))
    if isinstance(raw, str):
        if REFERENCE_MARKER in raw:
            return ReferenceMarker(text=raw)
        logger.warning("Unrecognised schedule text for %s/%s: %r", area_name, label, raw)
    return None


def _parse_group(raw: dict, stream_note: Optional[str]) -> GlassGroup:
    return GlassGroup(
        weekday=normalize_day(raw.get("svozovy_den")),
        weeks=tuple(_int_list(raw.get("tydny") or [], "glass weeks")),
        streets=_str_tuple(raw.get("ulice") or [], "glass streets"),
        note=raw.get("poznamka") or stream_note,
    )


def _weekday_or_none(value: Optional[str]) -> Optional[str]:
    return normalize_day(value) if value else None


def _str_tuple(values: Any, context: str = "") -> Tuple[str, ...]:
    if not isinstance(values, list):
        logger.warning("Ignoring %s: expected a list, got %r", context or "street list", values)
        return ()
    return tuple(str(v) for v in values)


def _int_list(values: Any, context: str) -> List[int]:
    if not isinstance(values, list):
        logger.warning("Ignoring %s: expected a list, got %r", context, values)
        return []
    out = []
    for v in values:
        try:
            out.append(int(v))
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric value %r in %s", v, context)
    return out
