# services/waste/resolver.py
from __future__ import annotations

import logging
import re
from datetime import date
from typing import Dict, List, Optional

from .model import (
    Area,
    DirectAreaRules,
    ExceptionArea,
    FlatEstateArea,
    PickupMatch,
    RuleStore,
    StreetResult,
    WasteStreamRule,
)
from .policy import DEFAULT_POLICY, ResolverPolicy, RulePolicy, normalize_day
from .recurrence import Cadence, next_pickup_dates, parse_cadence


logger = logging.getLogger(__name__)

# Longer digit runs cannot be house numbers.
_NUMERIC_RE = re.compile(r"^\d{1,9}$")


class ResultAccumulator:
    """Insertion-ordered key -> matches. Keys keep the order they were first seen."""

    def __init__(self):
        self._found: Dict[str, List[PickupMatch]] = {}

    def add(self, key: str, match: PickupMatch) -> None:
        self._found.setdefault(key, []).append(match)

    def __len__(self):
        return len(self._found)

    def results(self) -> List[StreetResult]:
        return [StreetResult(street_name=k, schedules=list(v)) for k, v in self._found.items()]


class _Query:
    def __init__(self, text: str, today: date, policy: ResolverPolicy):
        self.text = text
        self.today = today
        self.policy = policy
        self.number: Optional[int] = int(text) if _NUMERIC_RE.match(text) else None

    def hits(self, street: str) -> bool:
        return self.text in street.lower()

    def dates(self, cadence: Cadence, day_name: str, rule: RulePolicy):
        return tuple(next_pickup_dates(
            cadence, day_name, rule.date_count, today=self.today, max_weeks=self.policy.max_weeks,
        ))


def resolve(
    query: str,
    store: RuleStore,
    today: Optional[date] = None,
    policy: ResolverPolicy = DEFAULT_POLICY,
) -> List[StreetResult]:
    """
    Match a street fragment or house number against every area of the ruleset.
    Returns one StreetResult per matched street (or "č.p. N" for house
    numbers), in the order keys were first found. Never raises on odd rules;
    they simply contribute nothing.
    """
    text = (query or "").strip().lower()
    if len(text) < policy.min_query_length:
        return []

    q = _Query(text, today or date.today(), policy)
    found = ResultAccumulator()
    for area in store.areas:
        _resolve_area(area, q, found)

    logger.debug("Query %r matched %d keys", text, len(found))
    return found.results()


def _resolve_area(area: Area, q: _Query, found: ResultAccumulator) -> None:
    rules = area.rules
    if isinstance(rules, DirectAreaRules):
        _direct_streams(area, rules, q, found)
        _referencing_streams(area, rules, q, found)
        _glass_groups(area, rules, q, found)
    elif isinstance(rules, FlatEstateArea):
        _flat_estate(area, rules, q, found)
    elif isinstance(rules, ExceptionArea):
        _exception(area, rules, q, found)


def _direct_streams(area: Area, rules: DirectAreaRules, q: _Query, found: ResultAccumulator) -> None:
    rule = q.policy.direct
    for stream in rules.streams:
        if not stream.is_direct:
            continue
        cadence = parse_cadence(stream.frequency, default=rule.cadence)
        for day_key, streets in stream.schedule.days:
            day_name = normalize_day(day_key)
            for street in streets:
                if q.hits(street):
                    found.add(street, PickupMatch(
                        waste_type=rule.label or stream.label,
                        day_name=day_name,
                        dates=q.dates(cadence, day_name, rule),
                        area_name=area.name,
                    ))


def _referencing_streams(area: Area, rules: DirectAreaRules, q: _Query, found: ResultAccumulator) -> None:
    rule = q.policy.referencing
    referencing = [s for s in rules.streams if s.is_referencing]
    if not referencing:
        return

    base = rules.mixed_waste()
    if base is None:
        logger.debug("Area %r: no mixed-waste schedule to reference", area.name)
        return
    street_days = base.schedule.street_days()

    for stream in referencing:
        _emit_referenced(area, stream, street_days, rule, q, found)


def _emit_referenced(area, stream: WasteStreamRule, street_days, rule: RulePolicy, q: _Query, found) -> None:
    # Own cadence, weekday borrowed from the mixed-waste schedule.
    cadence = parse_cadence(stream.frequency, default=rule.cadence)
    for street, day_key in street_days.items():
        if q.hits(street):
            day_name = normalize_day(day_key)
            found.add(street, PickupMatch(
                waste_type=rule.label or stream.label,
                day_name=day_name,
                dates=q.dates(cadence, day_name, rule),
                area_name=area.name,
                description=stream.frequency,
            ))


def _glass_groups(area: Area, rules: DirectAreaRules, q: _Query, found: ResultAccumulator) -> None:
    rule = q.policy.glass
    for stream in rules.streams:
        for group in stream.groups:
            cadence = Cadence.explicit(group.weeks)
            for street in group.streets:
                if q.hits(street):
                    found.add(street, PickupMatch(
                        waste_type=rule.label or stream.label,
                        day_name=group.weekday,
                        dates=q.dates(cadence, group.weekday, rule),
                        area_name=area.name,
                        description=group.note,
                    ))


def _flat_estate(area: Area, rules: FlatEstateArea, q: _Query, found: ResultAccumulator) -> None:
    rule = q.policy.estate
    day_name = rules.weekday or rule.weekday
    for street in rules.streets:
        if q.hits(street):
            found.add(street, PickupMatch(
                waste_type=rule.label,
                day_name=day_name,
                dates=q.dates(rule.cadence, day_name, rule),
                area_name=area.name,
                description=rules.rule_text,
            ))


def _exception(area: Area, rules: ExceptionArea, q: _Query, found: ResultAccumulator) -> None:
    if q.number is None or q.number not in rules.house_numbers:
        return
    rule = q.policy.exception
    day_name = rules.weekday or rule.weekday
    found.add(f"č.p. {q.number}", PickupMatch(
        waste_type=rule.label,
        day_name=day_name,
        dates=q.dates(rule.cadence, day_name, rule),
        area_name=area.name,
        description=rules.description,
    ))
