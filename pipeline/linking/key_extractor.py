"""
Schlüsselextraktion für beliebige Sekundärdokumente.

Durchläuft einen generischen Dokumentbaum und liefert jeden Teil-Datensatz,
der das Zielfeld enthält, zusammen mit dem daraus abgeleiteten Schlüssel.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from .coordinates import parse_coordinate_or_numeric_list, ParsePolicy
from .generic_node import GenericNode, ListNode, MapNode, ScalarNode
from .join_keys import JoinKey, NumberListKey, PolygonKey, ScalarKey, TokenKey

logger = logging.getLogger(__name__)

# Durch Kommas oder einzelne Leerzeichen getrennte, vorzeichenlose Zahlen
NUMERIC_STRING = re.compile(r'^\d+(\.\d+)?([, ]\d+(\.\d+)?)*$')
TOKEN_SEPARATOR = re.compile(r'[, ]+')
TEXT_FIELD = '#text'

@dataclass
class KeyedRecord:
    """Sekundärdatensatz mit seinem Verknüpfungsschlüssel."""
    key: Optional[JoinKey]
    record: MapNode

def key_from_string(value: str) -> JoinKey:
    """Schlüssel aus einem Stringwert.

    Rein numerische Strings werden zu Zahlen (ohne Paarbildung), alle anderen
    werden von Anführungszeichen befreit und in Text-Token zerlegt. Der
    Originaltext der Zahlen bleibt für Textvergleiche erhalten.
    """
    if NUMERIC_STRING.match(value):
        numbers = parse_coordinate_or_numeric_list(value, ParsePolicy.RAW_NUMBERS)
        texts = tuple(token for token in TOKEN_SEPARATOR.split(value) if token)
        if len(numbers) == 1:
            return ScalarKey(numbers[0], text=texts[0])
        return NumberListKey(tuple(numbers), texts=texts)

    cleansed = value.replace('"', '')
    tokens = [token for token in TOKEN_SEPARATOR.split(cleansed) if token]
    return TokenKey(tuple(tokens))

def key_from_list(value: ListNode) -> Optional[JoinKey]:
    """Schlüssel aus einer Zahlenliste: Koordinatenpaare wie bei gml:posList."""
    raw = []
    for item in value.items:
        if not isinstance(item, ScalarNode) or item.value is None or isinstance(item.value, bool):
            return None
        raw.append(item.value)
    try:
        pairs = parse_coordinate_or_numeric_list(raw, ParsePolicy.COORDINATES)
    except (TypeError, ValueError):
        return None
    return PolygonKey(tuple(pairs))

def key_from_value(node: GenericNode, text_field: str = TEXT_FIELD) -> Optional[JoinKey]:
    if isinstance(node, ListNode):
        key = key_from_list(node)
        if key is None:
            logger.warning(f"⚠️ Liste mit nicht-numerischen Werten übersprungen: {node.to_python()!r}")
        return key
    if isinstance(node, ScalarNode):
        value = node.value
        if isinstance(value, str):
            return key_from_string(value)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return ScalarKey(float(value))
    if isinstance(node, MapNode):
        # XML-Element mit Attributen: Textinhalt verwenden
        text = node.get_scalar(text_field)
        if isinstance(text, str):
            return key_from_string(text)
    return None

def extract_keys(doc: GenericNode, target_field: str, text_field: str = TEXT_FIELD) -> List[KeyedRecord]:
    """Sammelt alle Datensätze mit ``target_field`` samt Schlüssel.

    Args:
        doc: Sekundärdokument
        target_field: Name des Schlüsselfeldes

    Returns:
        Liste von KeyedRecord; ein Knoten kann mit eigenem Feld und über
        verschachtelte Treffer mehrfach beitragen. Keine Reihenfolgegarantie.
    """
    results: List[KeyedRecord] = []
    _collect(doc, target_field, text_field, results)
    return results

def _collect(node: GenericNode, target_field: str, text_field: str, results: List[KeyedRecord]) -> None:
    if isinstance(node, MapNode) and node.has(target_field):
        key = key_from_value(node.get(target_field), text_field)
        if key is not None:
            results.append(KeyedRecord(key=key, record=node))

    for child in node.children():
        if isinstance(child, (MapNode, ListNode)):
            _collect(child, target_field, text_field, results)
