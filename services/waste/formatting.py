# services/waste/formatting.py
from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from .model import StreetResult

CZECH_WEEKDAYS = ("pondělí", "úterý", "středa", "čtvrtek", "pátek", "sobota", "neděle")

NEAREST_LABEL = "(Nejbližší)"


def format_date_cz(d: date) -> str:
    """'pondělí 19. 10. 2026' (cs-CZ long weekday, numeric day/month/year)."""
    return f"{CZECH_WEEKDAYS[d.weekday()]} {d.day}. {d.month}. {d.year}"


def stream_category(waste_type: str) -> str:
    """Badge category for a stream label; the page colours badges by it."""
    t = waste_type or ""
    if "SKO" in t or "Směsný" in t:
        return "mixed"
    if "Plast" in t:
        return "plastic"
    if "Papír" in t:
        return "paper"
    if "Sklo" in t:
        return "glass"
    if "Sídliště" in t:
        return "estate"
    return "other"


def truncate(text: Optional[str], limit: int = 60) -> str:
    if not text:
        return ""
    return text if len(text) <= limit else text[:limit] + "..."


def results_to_json(query: str, validity: str, results: Iterable[StreetResult]) -> dict:
    return {
        "query": query,
        "validity": validity,
        "results": [r.to_dict() for r in results],
    }


def results_to_lines(results: Iterable[StreetResult]) -> List[str]:
    """Plain-text rendering used by the CLI."""
    lines: List[str] = []
    for r in results:
        lines.append(f"{r.street_name} [{r.area_name or ''}]")
        for s in r.schedules:
            lines.append(f"  {s.waste_type} ({s.day_name})")
            if not s.dates:
                lines.append("    Termíny nenalezeny (zkontrolujte rok)")
            for i, d in enumerate(s.dates):
                suffix = f" {NEAREST_LABEL}" if i == 0 else ""
                lines.append(f"    {format_date_cz(d)}{suffix}")
    return lines
