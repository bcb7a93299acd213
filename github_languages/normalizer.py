# normalizer.py

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Mapping

TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class LanguageStat:
    language: str
    bytes: int
    percent: float

    def as_dict(self) -> Dict[str, object]:
        return {"language": self.language, "percent": self.percent, "bytes": self.bytes}


def round2(value) -> float:
    """Round to two decimals, half away from zero."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return float(value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def percent_of(count: int, total: int) -> float:
    # Exact decimal ratio so values landing on x.xx5 round predictably
    return round2(Decimal(count) * 100 / Decimal(total))


def normalize(byte_map: Mapping[str, int]) -> List[LanguageStat]:
    """Convert merged byte counts into ranked percentage records.

    Ordered by percent descending; equal percentages fall back to the
    language name so the output never depends on mapping order.
    """
    if not byte_map:
        raise ValueError("cannot normalize an empty language map")
    total = sum(byte_map.values())
    if total <= 0:
        raise ValueError("language map has no bytes")

    stats = [
        LanguageStat(language=lang, bytes=count, percent=percent_of(count, total))
        for lang, count in byte_map.items()
    ]
    stats.sort(key=lambda s: (-s.percent, s.language))
    return stats


def total_bytes(stats: List[LanguageStat]) -> int:
    return sum(s.bytes for s in stats)
