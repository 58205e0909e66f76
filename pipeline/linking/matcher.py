"""
Abgleich von Primär- und Sekundärschlüsseln.

Jede Kombination (Gebäude, Sekundärdatensatz) wird unabhängig geprüft:
Gleichheit bei Einzelwerten, Bereichsprüfung bei Zahlenbereichen und
Punkt-in-Polygon bei Grundflächen. Das Ergebnis ist eine ungeordnete
n:m-Zuordnung.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from itertools import product
from typing import List, Optional, Sequence, Tuple

from .coordinates import normalize_coordinate_order, point_in_polygon
from .generic_node import MapNode, scalar_text
from .join_keys import (
    Coordinate,
    JoinKey,
    NumberListKey,
    PolygonKey,
    PrimaryKeyResult,
    RangeKey,
    ScalarKey,
    TokenKey,
)
from .key_extractor import KeyedRecord

logger = logging.getLogger(__name__)

@dataclass
class MatchedPair:
    """Verknüpftes Paar aus Gebäude-ID und Sekundärdatensatz."""
    building_id: str
    matched_record: MapNode

def _to_float(value) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None

def secondary_point(key: JoinKey) -> Optional[Coordinate]:
    """Testpunkt eines Sekundärschlüssels für den Punkt-in-Polygon-Test."""
    if isinstance(key, PolygonKey):
        return key.vertices[0] if key.vertices else None
    if isinstance(key, NumberListKey):
        values = key.values
    elif isinstance(key, TokenKey):
        values = key.tokens
    else:
        return None
    if len(values) < 2:
        return None
    x, y = _to_float(values[0]), _to_float(values[1])
    if x is None or y is None:
        return None
    return x, y

def scalar_matches(primary: ScalarKey, secondary: JoinKey) -> bool:
    """Erstes Token des Sekundärschlüssels gegen den Primärwert.

    Der Sekundärwert wird im Typ des Primärwerts verglichen: Zahlen numerisch,
    Text als Text. Sekundäre Zahlen zählen dabei mit ihrem Originaltext bzw.
    ihrer Textdarstellung (``12.5`` -> ``"12.5"``, ``8.0`` -> ``"8"``).
    """
    token = secondary.first_token()
    if token is None:
        return False

    expected = primary.value
    if isinstance(expected, (int, float)) and not isinstance(expected, bool):
        return _to_float(token) == float(expected)

    return secondary.first_text() == scalar_text(expected)

def pair_matches(primary: PrimaryKeyResult, secondary: KeyedRecord,
                 normalize_order: bool = False) -> bool:
    """Prüft eine einzelne Kombination; frei von Seiteneffekten."""
    key = primary.key
    if isinstance(key, ScalarKey):
        return scalar_matches(key, secondary.key)

    if isinstance(key, RangeKey):
        value = _to_float(secondary.key.first_token())
        return value is not None and key.contains(value)

    if isinstance(key, PolygonKey):
        point = secondary_point(secondary.key)
        if point is None:
            logger.debug(f"⚠️ Kein Testpunkt im Sekundärschlüssel: {secondary.key!r}")
            return False
        if normalize_order:
            point = normalize_coordinate_order(point)
        return point_in_polygon(point, key.vertices)

    return False

def match_pairs(primary: Sequence[PrimaryKeyResult], secondary: Sequence[KeyedRecord],
                normalize_order: bool = False, max_workers: int = 1) -> List[MatchedPair]:
    """Kreuzt alle Primär- mit allen Sekundärschlüsseln.

    Args:
        primary: Ergebnisse der Primärextraktion
        secondary: Ergebnisse der Sekundärextraktion
        normalize_order: Sekundärpunkte in (Breite, Länge) normalisieren
        max_workers: > 1 verteilt die Prüfungen auf einen Thread-Pool

    Returns:
        Liste von MatchedPair; leer, wenn keine Verknüpfung möglich ist
    """
    if not primary or all(not result.is_usable for result in primary):
        logger.error("❌ Alle Primärschlüssel sind leer, keine Verknüpfung möglich")
        return []
    if not secondary or all(record.key is None for record in secondary):
        logger.error("❌ Alle Sekundärschlüssel sind leer, keine Verknüpfung möglich")
        return []

    usable_primary = [result for result in primary if result.is_usable]
    usable_secondary = []
    for record in secondary:
        if record.key is None:
            logger.warning("⚠️ Sekundärdatensatz ohne Schlüssel übersprungen")
            continue
        usable_secondary.append(record)

    combinations: List[Tuple[PrimaryKeyResult, KeyedRecord]] = list(product(usable_primary, usable_secondary))

    def check(combination: Tuple[PrimaryKeyResult, KeyedRecord]) -> Optional[MatchedPair]:
        building, record = combination
        if pair_matches(building, record, normalize_order):
            return MatchedPair(building_id=building.building_id, matched_record=record.record)
        return None

    if max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            outcomes = list(executor.map(check, combinations))
    else:
        outcomes = [check(combination) for combination in combinations]

    pairs = [pair for pair in outcomes if pair is not None]
    logger.info(f"📊 {len(pairs)} Paare aus {len(combinations)} Kombinationen")
    return pairs
