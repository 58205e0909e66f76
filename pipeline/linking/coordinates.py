"""
Koordinaten- und Zahlen-Parsing sowie Punkt-in-Polygon-Test.

Alle Heuristiken zum Zerlegen von Koordinaten- und Zahlenstrings liegen in
``parse_coordinate_or_numeric_list``. Die Richtlinie bestimmt, was aus der
Zahlenfolge wird:

1. ``COORDINATES``: Ist die Anzahl durch 3 teilbar, wird jeder dritte Wert
   (Höhe) verworfen; danach werden aufeinanderfolgende Werte zu (x, y)-Paaren
   zusammengefasst. Ein überzähliger letzter Wert wird verworfen.
2. ``RAW_NUMBERS``: Die Zahlen bleiben unverändert (keine Paarbildung, keine
   Höhenentfernung). So verarbeitet die Sekundärseite numerische Strings.
3. ``PAIR_SUMS``: Wie 1., danach wird jedes Paar zu seiner Summe addiert.
   Grundlage des Bereichsschlüssels (``footprint_key_mode: range``).
"""

import logging
import re
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
from shapely.geometry import Polygon

from .join_keys import Coordinate

logger = logging.getLogger(__name__)

TOKEN_SEPARATOR = re.compile(r'[\s,]+')

class ParsePolicy(Enum):
    COORDINATES = 'coordinates'
    RAW_NUMBERS = 'raw_numbers'
    PAIR_SUMS = 'pair_sums'

def parse_numeric_tokens(text: str) -> List[float]:
    """Zerlegt einen String an Leerzeichen/Kommas in Zahlen.

    Raises:
        ValueError: Wenn ein Token keine Zahl ist
    """
    return [float(token) for token in TOKEN_SEPARATOR.split(text.strip()) if token]

def drop_every_third(values: Sequence[float]) -> List[float]:
    return [value for index, value in enumerate(values) if (index + 1) % 3 != 0]

def pair_values(values: Sequence[float]) -> List[Coordinate]:
    """Fasst aufeinanderfolgende Werte zu Paaren zusammen; Rest wird verworfen."""
    return [(values[i], values[i + 1]) for i in range(0, len(values) - 1, 2)]

def pair_coordinates(values: Sequence[float]) -> List[Coordinate]:
    """Tripel (x, y, z) bzw. Paare (x, y) -> Liste von 2D-Koordinaten."""
    if len(values) % 3 == 0:
        values = drop_every_third(values)
    return pair_values(values)

def pair_sums(values: Sequence[float]) -> List[float]:
    return [x + y for x, y in pair_coordinates(values)]

def parse_coordinate_or_numeric_list(
    value: Union[str, Iterable[float]],
    policy: ParsePolicy = ParsePolicy.COORDINATES,
) -> Union[List[Coordinate], List[float]]:
    """Zentrale Zerlegung von Koordinaten- und Zahlenwerten.

    Args:
        value: String wie ``"10 20 5 30 40 6"`` oder bereits eine Zahlenfolge
        policy: Siehe Modulbeschreibung

    Returns:
        Liste von (x, y)-Paaren (COORDINATES) oder Zahlen (RAW_NUMBERS, PAIR_SUMS)

    Raises:
        ValueError: Bei nicht-numerischen Token
    """
    if isinstance(value, str):
        numbers = parse_numeric_tokens(value)
    else:
        numbers = [float(v) for v in value]

    if policy is ParsePolicy.RAW_NUMBERS:
        return numbers
    if policy is ParsePolicy.PAIR_SUMS:
        return pair_sums(numbers)
    return pair_coordinates(numbers)

def value_range(values: Sequence[float]) -> Optional[Tuple[float, float]]:
    """(min, max) einer Zahlenfolge; None bei weniger als zwei Werten."""
    if len(values) < 2:
        return None
    return min(values), max(values)

def point_in_polygon(point: Sequence[float], polygon: Sequence[Sequence[float]]) -> bool:
    """Kreuzungszahl-Test (even-odd ray casting).

    Ein Punkt liegt innen, wenn ein horizontaler Strahl vom Punkt ins
    Unendliche eine ungerade Anzahl Polygonkanten schneidet.
    """
    vertices = np.asarray(polygon, dtype=float)
    if vertices.ndim != 2 or vertices.shape[0] < 3 or vertices.shape[1] < 2:
        return False

    x, y = float(point[0]), float(point[1])
    xi, yi = vertices[:, 0], vertices[:, 1]
    # Kante i verbindet Vorgänger j mit i
    xj, yj = np.roll(xi, 1), np.roll(yi, 1)

    straddles = (yi > y) != (yj > y)
    with np.errstate(divide='ignore', invalid='ignore'):
        x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
    crossings = straddles & (x < x_cross)
    return bool(np.count_nonzero(crossings) % 2)

def normalize_coordinate_order(coordinate: Coordinate) -> Coordinate:
    """Bringt ein Paar anhand der Wertebereiche in die Reihenfolge (Breite, Länge).

    Liegt der erste Wert in [-180, 180] und der zweite in [-90, 90], wird das
    Paar als (Länge, Breite) gedeutet und vertauscht, sonst unverändert
    zurückgegeben. Optionaler Normalisierungsschritt, siehe
    ``matching.normalize_coordinate_order``.
    """
    first, second = coordinate
    if abs(first) <= 180 and abs(second) <= 90:
        return second, first
    return first, second

def footprint_is_valid(vertices: Sequence[Coordinate]) -> bool:
    """Prüft eine Grundfläche mit shapely auf geometrische Gültigkeit."""
    try:
        polygon = Polygon(vertices)
    except (ValueError, TypeError) as e:
        logger.warning(f"⚠️ Grundfläche nicht konstruierbar: {str(e)}")
        return False
    if not polygon.is_valid:
        logger.warning("⚠️ Grundfläche ist geometrisch ungültig (z.B. selbstüberschneidend)")
        return False
    return True

def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))

def format_coordinates(vertices: Iterable[Coordinate]) -> str:
    """(x, y)-Paare -> ``"x1 y1 x2 y2 ..."``."""
    return ' '.join(f"{format_number(x)} {format_number(y)}" for x, y in vertices)
