"""
Generischer Dokumentbaum.

Ein geparstes Dokument (GML, XML, JSON oder CSV) wird als geschlossener
Variantentyp dargestellt: ScalarNode, ListNode oder MapNode. Feldnamen mit
Attribut-Präfix (``@_``) sind Attribute des umschließenden Knotens, ``#text``
enthält den Textinhalt eines Elements.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

ScalarValue = Union[str, int, float, bool, None]

class GenericNode:
    """Basisklasse aller Knoten."""

    is_scalar = False
    is_list = False
    is_map = False

    def children(self) -> Iterator['GenericNode']:
        """Direkte Kindknoten in Dokumentreihenfolge."""
        return iter(())

    def to_python(self) -> Any:
        raise NotImplementedError

@dataclass
class ScalarNode(GenericNode):
    """Blattwert (Text, Zahl, Wahrheitswert oder leer)."""
    value: ScalarValue = None

    is_scalar = True

    def to_python(self) -> ScalarValue:
        return self.value

@dataclass
class ListNode(GenericNode):
    """Geordnete Liste von Knoten."""
    items: List[GenericNode] = field(default_factory=list)

    is_list = True

    def children(self) -> Iterator[GenericNode]:
        return iter(self.items)

    def to_python(self) -> List[Any]:
        return [item.to_python() for item in self.items]

    def __len__(self) -> int:
        return len(self.items)

@dataclass
class MapNode(GenericNode):
    """Zuordnung Feldname -> Knoten. Feldnamen sind eindeutig."""
    fields: Dict[str, GenericNode] = field(default_factory=dict)

    is_map = True

    def children(self) -> Iterator[GenericNode]:
        return iter(self.fields.values())

    def items(self) -> Iterator[Tuple[str, GenericNode]]:
        return iter(self.fields.items())

    def has(self, name: str) -> bool:
        return name in self.fields

    def get(self, name: str) -> Optional[GenericNode]:
        return self.fields.get(name)

    def get_scalar(self, name: str) -> ScalarValue:
        """Gibt den Skalarwert eines Feldes zurück, sonst None."""
        node = self.fields.get(name)
        if isinstance(node, ScalarNode):
            return node.value
        return None

    def set(self, name: str, node: GenericNode) -> None:
        self.fields[name] = node

    def to_python(self) -> Dict[str, Any]:
        return {name: node.to_python() for name, node in self.fields.items()}

def from_python(value: Any) -> GenericNode:
    """Wandelt verschachtelte dicts/lists/Skalare in einen Knotenbaum um.

    Raises:
        TypeError: Bei Werten, die kein Baumbestandteil sein können
    """
    if isinstance(value, GenericNode):
        return value
    if isinstance(value, dict):
        return MapNode({str(k): from_python(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return ListNode([from_python(v) for v in value])
    if value is None or isinstance(value, (str, int, float, bool)):
        return ScalarNode(value)
    raise TypeError(f"Nicht unterstützter Knotentyp: {type(value).__name__}")

def scalar_text(value: ScalarValue) -> Optional[str]:
    """Textdarstellung eines Skalars; ganzzahlige Floats ohne Nachkommastellen."""
    if value is None:
        return None
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

def node_text(node: Optional[GenericNode], text_field: str = '#text') -> Optional[str]:
    """Inline-Text eines Knotens.

    Skalare liefern ihren Wert, Elemente mit Attributen ihr ``#text``-Feld.
    """
    if isinstance(node, ScalarNode):
        return scalar_text(node.value)
    if isinstance(node, MapNode):
        return scalar_text(node.get_scalar(text_field))
    return None

def as_list(node: Optional[GenericNode]) -> List[GenericNode]:
    """Einzelknoten werden zur einelementigen Liste, None zur leeren Liste."""
    if node is None:
        return []
    if isinstance(node, ListNode):
        return list(node.items)
    return [node]

def is_empty(node: Optional[GenericNode]) -> bool:
    """True für fehlende Knoten, None, leere Strings und leere Container."""
    if node is None:
        return True
    if isinstance(node, ScalarNode):
        return node.value is None or node.value == ''
    if isinstance(node, ListNode):
        return not node.items
    if isinstance(node, MapNode):
        return not node.fields
    return False
