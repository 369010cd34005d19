# services/waste/policy.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from .recurrence import EVEN_WEEKS, EVERY_WEEK, MAX_WEEKS, Cadence


# Dataset keys are ASCII-folded; the resolver works with display names.
WEEKDAY_KEYS = {
    "Pondeli": "Pondělí",
    "Utery": "Úterý",
    "Streda": "Středa",
    "Ctvrtek": "Čtvrtek",
    "Patek": "Pátek",
    "Sobota": "Sobota",
    "Nedele": "Neděle",
}


def normalize_day(key: Optional[str]) -> str:
    """Display name for a dataset weekday key. Unknown keys pass through."""
    key = (key or "").strip()
    return WEEKDAY_KEYS.get(key, key)


@dataclass(frozen=True)
class RulePolicy:
    """Fallbacks for one rule kind."""
    label: Optional[str] = None          # None -> use the stream's own label
    cadence: Cadence = EVEN_WEEKS        # used when the rule states no cadence
    weekday: Optional[str] = None        # used when the rule states no weekday
    date_count: int = 3


@dataclass(frozen=True)
class ResolverPolicy:
    direct: RulePolicy = RulePolicy()
    referencing: RulePolicy = RulePolicy()
    glass: RulePolicy = RulePolicy(label="Sklo")
    estate: RulePolicy = RulePolicy(
        label="Sídliště - Kompletní svoz", cadence=EVERY_WEEK, weekday="Pondělí", date_count=4
    )
    # Municipal default for individual pickups; override via config.
    exception: RulePolicy = RulePolicy(
        label="Individuální svoz", cadence=EVERY_WEEK, weekday="Čtvrtek", date_count=4
    )
    min_query_length: int = 2
    max_weeks: int = MAX_WEEKS


DEFAULT_POLICY = ResolverPolicy()


def build_policy(settings: Optional[dict] = None) -> ResolverPolicy:
    """
    Overlay the `waste` config section on the default policy table.
    Recognised keys: min_query_length, max_weeks, date_count,
    estate_date_count, exception_date_count, estate_weekday, exception_weekday.
    """
    s = settings or {}
    base = DEFAULT_POLICY

    date_count = int(s.get("date_count", base.direct.date_count))
    estate = replace(
        base.estate,
        weekday=normalize_day(s.get("estate_weekday") or base.estate.weekday),
        date_count=int(s.get("estate_date_count", base.estate.date_count)),
    )
    exception = replace(
        base.exception,
        weekday=normalize_day(s.get("exception_weekday") or base.exception.weekday),
        date_count=int(s.get("exception_date_count", base.exception.date_count)),
    )
    return ResolverPolicy(
        direct=replace(base.direct, date_count=date_count),
        referencing=replace(base.referencing, date_count=date_count),
        glass=replace(base.glass, date_count=date_count),
        estate=estate,
        exception=exception,
        min_query_length=int(s.get("min_query_length", base.min_query_length)),
        max_weeks=int(s.get("max_weeks", base.max_weeks)),
    )
