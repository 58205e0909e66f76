"""
Verknüpfungsschlüssel.

Aus Feldwerten abgeleitete, normalisierte Werte, über die Primär- und
Sekundärdatensätze verglichen werden.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from .generic_node import scalar_text

Coordinate = Tuple[float, float]

@dataclass(frozen=True)
class ScalarKey:
    """Einzelwert (Text oder Zahl).

    ``text`` hält bei aus Strings gelesenen Zahlen den Originaltext,
    z.B. ``"0012"`` für den Wert 12.0.
    """
    value: Union[str, float, int, bool]
    text: Optional[str] = field(default=None, compare=False)

    def first_token(self):
        return self.value

    def first_text(self) -> Optional[str]:
        return self.text if self.text is not None else scalar_text(self.value)

@dataclass(frozen=True)
class RangeKey:
    """Zahlenbereich [minimum, maximum]."""
    minimum: float
    maximum: float

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum

    def first_token(self):
        return self.minimum

    def first_text(self) -> Optional[str]:
        return scalar_text(self.minimum)

@dataclass(frozen=True)
class PolygonKey:
    """Folge von (x, y)-Paaren. Ein einzelnes Paar steht für einen Punkt."""
    vertices: Tuple[Coordinate, ...]

    def first_token(self):
        return self.vertices[0][0] if self.vertices else None

    def first_text(self) -> Optional[str]:
        return scalar_text(self.first_token())

@dataclass(frozen=True)
class NumberListKey:
    """Rohe Zahlenfolge aus einem numerischen String (ohne Paarbildung)."""
    values: Tuple[float, ...]
    texts: Tuple[str, ...] = field(default=(), compare=False)

    def first_token(self):
        return self.values[0] if self.values else None

    def first_text(self) -> Optional[str]:
        if self.texts:
            return self.texts[0]
        return scalar_text(self.first_token())

@dataclass(frozen=True)
class TokenKey:
    """Rohe Text-Token aus einem nicht-numerischen String."""
    tokens: Tuple[str, ...]

    def first_token(self):
        return self.tokens[0] if self.tokens else None

    def first_text(self) -> Optional[str]:
        return self.first_token()

JoinKey = Union[ScalarKey, RangeKey, PolygonKey, NumberListKey, TokenKey]

@dataclass(frozen=True)
class PrimaryKeyResult:
    """Ergebnis der Schlüsselextraktion für ein Gebäude.

    ``key`` ist None, wenn das Gebäude keinen Wert für das Zielfeld hat.
    """
    key: Optional[JoinKey]
    building_id: Optional[str]

    @property
    def is_usable(self) -> bool:
        return self.key is not None and self.building_id is not None
