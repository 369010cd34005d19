# services/waste/recurrence.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import FrozenSet, Iterable, List, Optional

from .weeks import week_monday, week_number


logger = logging.getLogger(__name__)

EVEN = "even"
ODD = "odd"
EXPLICIT = "explicit"
EVERY = "every"

# Display weekday name -> offset from Monday.
WEEKDAY_OFFSETS = {
    "Pondělí": 0,
    "Úterý": 1,
    "Středa": 2,
    "Čtvrtek": 3,
    "Pátek": 4,
    "Sobota": 5,
    "Neděle": 6,
}

# Roughly two years of weeks.
MAX_WEEKS = 100

# Explicit list in parens wins over any keyword: "(3, 7, 11)"
_WEEK_LIST_RE = re.compile(r"\(([\d,\s]+)\)")


@dataclass(frozen=True)
class Cadence:
    """Predicate over ISO week numbers."""
    kind: str
    weeks: FrozenSet[int] = field(default_factory=frozenset)

    @classmethod
    def explicit(cls, weeks: Iterable[int]) -> "Cadence":
        return cls(EXPLICIT, frozenset(int(w) for w in weeks))

    def matches(self, week_no: int) -> bool:
        if self.kind == EVEN:
            return week_no % 2 == 0
        if self.kind == ODD:
            return week_no % 2 == 1
        if self.kind == EXPLICIT:
            return week_no in self.weeks
        if self.kind == EVERY:
            return True
        return False


EVEN_WEEKS = Cadence(EVEN)
ODD_WEEKS = Cadence(ODD)
# Every ISO week of the year, i.e. the explicit set 1..53.
EVERY_WEEK = Cadence(EVERY)


def parse_cadence(text: Optional[str], default: Cadence = EVEN_WEEKS) -> Cadence:
    """
    Read a cadence from free-form frequency text.
    Examples:
      'Sudé týdny'                  -> even
      'Liché týdny (pondělí)'       -> odd
      'Týdny (3, 7, 11, 15)'        -> explicit {3, 7, 11, 15}
      ''  / None / 'každý měsíc'    -> `default`
    """
    if not text:
        return default

    m = _WEEK_LIST_RE.search(text)
    if m:
        weeks = []
        for part in m.group(1).split(","):
            part = part.strip()
            if part.isdigit():
                weeks.append(int(part))
        if weeks:
            return Cadence.explicit(weeks)

    lower = text.lower()
    if "sudé" in lower:
        return EVEN_WEEKS
    if "liché" in lower:
        return ODD_WEEKS
    return default


def next_pickup_dates(
    cadence: Cadence,
    day_name: str,
    count: int = 3,
    *,
    today: Optional[date] = None,
    max_weeks: int = MAX_WEEKS,
) -> List[date]:
    """
    Next `count` dates (today included) falling on `day_name` in a week the
    cadence accepts, ascending. Returns fewer when `max_weeks` weeks have been
    scanned, and nothing for an unknown weekday name.
    """
    offset = WEEKDAY_OFFSETS.get(day_name)
    if offset is None:
        logger.debug("Unknown weekday %r, no dates produced", day_name)
        return []

    today = today or date.today()
    monday = week_monday(today)

    dates: List[date] = []
    for _ in range(max_weeks):
        if len(dates) >= count:
            break
        target = monday + timedelta(days=offset)
        if cadence.matches(week_number(target)) and target >= today:
            dates.append(target)
        monday += timedelta(days=7)
    return dates
