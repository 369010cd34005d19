# services/waste/model.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

MIXED_WASTE_MARKERS = ("Směsný", "SKO")


@dataclass(frozen=True)
class DirectMapping:
    days: Tuple[Tuple[str, Tuple[str, ...]], ...]   # (weekday key, streets), dataset order

    def street_days(self) -> Dict[str, str]:
        """Street -> weekday key. A street listed under two days keeps the later one."""
        lookup: Dict[str, str] = {}
        for day_key, streets in self.days:
            for street in streets:
                lookup[street] = day_key
        return lookup


@dataclass(frozen=True)
class ReferenceMarker:
    text: str                                       # e.g. "Stejný rozpis jako SKO"


Schedule = Union[DirectMapping, ReferenceMarker, None]


@dataclass(frozen=True)
class GlassGroup:
    weekday: str                                    # display name, e.g. "Pátek"
    weeks: Tuple[int, ...]
    streets: Tuple[str, ...]
    note: Optional[str] = None


@dataclass(frozen=True)
class WasteStreamRule:
    label: str                                      # "Směsný komunální odpad", "Plast", ...
    frequency: Optional[str] = None                 # cadence text as written, e.g. "Liché týdny"
    schedule: Schedule = None
    groups: Tuple[GlassGroup, ...] = ()
    note: Optional[str] = None

    @property
    def is_mixed_waste(self) -> bool:
        return any(m in self.label for m in MIXED_WASTE_MARKERS)

    @property
    def is_direct(self) -> bool:
        return isinstance(self.schedule, DirectMapping)

    @property
    def is_referencing(self) -> bool:
        return isinstance(self.schedule, ReferenceMarker)


@dataclass(frozen=True)
class DirectAreaRules:
    streams: Tuple[WasteStreamRule, ...] = ()

    def mixed_waste(self) -> Optional[WasteStreamRule]:
        for stream in self.streams:
            if stream.is_mixed_waste and stream.is_direct:
                return stream
        return None


@dataclass(frozen=True)
class FlatEstateArea:
    streets: Tuple[str, ...]
    weekday: Optional[str] = None
    rule_text: Optional[str] = None


@dataclass(frozen=True)
class ExceptionArea:
    house_numbers: FrozenSet[int]
    weekday: Optional[str] = None
    description: Optional[str] = None


AreaRules = Union[DirectAreaRules, FlatEstateArea, ExceptionArea]


@dataclass(frozen=True)
class Area:
    name: str
    rules: AreaRules


@dataclass(frozen=True)
class RuleStore:
    validity: str
    areas: Tuple[Area, ...]


# --- query results ---

@dataclass(frozen=True)
class PickupMatch:
    waste_type: str
    day_name: str
    dates: Tuple[date, ...]
    area_name: str
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "waste_type": self.waste_type,
            "day_name": self.day_name,
            "dates": [d.isoformat() for d in self.dates],
            "description": self.description,
            "area": self.area_name,
        }


@dataclass
class StreetResult:
    street_name: str
    schedules: List[PickupMatch] = field(default_factory=list)

    @property
    def area_name(self) -> Optional[str]:
        return self.schedules[0].area_name if self.schedules else None

    def to_dict(self) -> dict:
        return {
            "street": self.street_name,
            "schedules": [s.to_dict() for s in self.schedules],
        }
