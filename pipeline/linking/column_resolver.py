"""
Spaltenauflösung für den tabellarischen Export.

Löst angeforderte Felder je Gebäude zu Textwerten auf. Unterstützt werden
direkte Feldnamen, ``gml:id``, Namen generischer Attribute, qualifizierte
Felder der Form ``tag@=qualifier`` (codeSpace oder uom) sowie die
Grundflächenkoordinaten. Fehlende Felder ergeben einen leeren String.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .config import LinkingConfig, load_linking_config
from .coordinates import format_coordinates, parse_coordinate_or_numeric_list, ParsePolicy
from .generic_node import GenericNode, ListNode, MapNode, as_list, node_text

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class FieldRequest:
    """Zerlegtes Exportfeld."""
    field: str
    tag: str
    qualifier: Optional[str] = None

    @classmethod
    def parse(cls, field: str, separator: str) -> 'FieldRequest':
        if separator in field:
            tag, qualifier = field.split(separator, 1)
            return cls(field=field, tag=tag, qualifier=qualifier)
        return cls(field=field, tag=field)

class ColumnResolver:
    """Löst Exportfelder gegen Gebäude-Teilbäume auf."""

    def __init__(self, config: Optional[LinkingConfig] = None):
        self.config = config or load_linking_config()
        self.logger = logging.getLogger(__name__)

    def resolve_values(self, building: GenericNode, field: str) -> List[str]:
        """Alle Werte eines Feldes innerhalb eines Gebäudes in Dokumentreihenfolge."""
        request = FieldRequest.parse(field, self.config.qualifier_separator)
        if request.qualifier is None and request.tag == self.config.footprint_field:
            footprint = self._footprint(building)
            return [footprint] if footprint is not None else []

        values = []
        if (request.tag == self.config.id_field and request.qualifier is None
                and isinstance(building, MapNode) and building.get_scalar(self.config.id_attribute) is not None):
            # Gebäudeknoten selbst statt cityObjectMember
            values.append(str(building.get_scalar(self.config.id_attribute)))
        values.extend(self._iter_values(building, request))
        return values

    def resolve_row(self, building: GenericNode, requested_fields: Sequence[str]) -> List[str]:
        """Zeile für ein Gebäude: angeforderte Spalten, danach Überlaufwerte."""
        cells, overflow = self._resolve_cells(building, requested_fields)
        return cells + [value for values in overflow.values() for value in values]

    def resolve_table(self, buildings: Sequence[GenericNode], requested_fields: Sequence[str]) -> List[List[str]]:
        """Kopfzeile und eine Zeile je Gebäude.

        Mehrfachwerte eines Feldes werden als zusätzliche Spalten angehängt;
        die Kopfzeile wird je neuer Überlaufspalte einmal erweitert.
        """
        header, label_counts = self._header(requested_fields)
        overflow_columns: Dict[Tuple[str, int], int] = {}
        rows: List[List[str]] = []

        for building in buildings:
            cells, overflow = self._resolve_cells(building, requested_fields)
            row = list(cells)
            for field, values in overflow.items():
                for position, value in enumerate(values, start=1):
                    column = (field, position)
                    if column not in overflow_columns:
                        overflow_columns[column] = len(header)
                        header.append(self._next_label(self.config.column_label(field), label_counts))
                    index = overflow_columns[column]
                    row.extend([''] * (index + 1 - len(row)))
                    row[index] = value
            rows.append(row)

        for row in rows:
            row.extend([''] * (len(header) - len(row)))

        self.logger.info(f"📊 {len(rows)} Zeilen, {len(header)} Spalten aufgelöst")
        return [header] + rows

    def _resolve_cells(self, building: GenericNode,
                       requested_fields: Sequence[str]) -> Tuple[List[str], Dict[str, List[str]]]:
        cells: List[str] = []
        overflow: Dict[str, List[str]] = {}
        for field in requested_fields:
            values = self.resolve_values(building, field)
            cells.append(values[0] if values else '')
            if len(values) > 1:
                overflow.setdefault(field, []).extend(values[1:])
        return cells, overflow

    def _header(self, requested_fields: Sequence[str]) -> Tuple[List[str], Dict[str, int]]:
        label_counts: Dict[str, int] = {}
        header = [self._next_label(self.config.column_label(field), label_counts)
                  for field in requested_fields]
        return header, label_counts

    @staticmethod
    def _next_label(label: str, label_counts: Dict[str, int]) -> str:
        count = label_counts.get(label, 0) + 1
        label_counts[label] = count
        return label if count == 1 else f"{label}_{count}"

    def _iter_values(self, node: GenericNode, request: FieldRequest) -> Iterator[str]:
        config = self.config
        if isinstance(node, ListNode):
            for item in node.items:
                yield from self._iter_values(item, request)
            return
        if not isinstance(node, MapNode):
            return

        for key, value in node.items():
            if request.tag == config.id_field and request.qualifier is None and key == config.building_field:
                for building in as_list(value):
                    if isinstance(building, MapNode) and building.get_scalar(config.id_attribute) is not None:
                        yield str(building.get_scalar(config.id_attribute))
                continue

            if (request.qualifier is None and key == config.generic_name_attribute
                    and node.get_scalar(key) == request.tag):
                text = node_text(node.get(config.generic_value_field), config.text_field)
                if text is not None:
                    yield text
                continue

            if key == request.tag:
                for item in as_list(value):
                    if request.qualifier is not None and not self._has_qualifier(item, request.qualifier):
                        continue
                    text = node_text(item, config.text_field)
                    if text is not None:
                        yield text
                continue

            if isinstance(value, (MapNode, ListNode)):
                yield from self._iter_values(value, request)

    def _has_qualifier(self, node: GenericNode, qualifier: str) -> bool:
        if not isinstance(node, MapNode):
            return False
        return any(str(node.get_scalar(attribute)) == qualifier
                   for attribute in self.config.qualifier_attributes
                   if node.get_scalar(attribute) is not None)

    def _footprint(self, building: GenericNode) -> Optional[str]:
        """Grundflächenkoordinaten ohne Höhenwerte, bevorzugt aus lod0RoofEdge."""
        container = _first_field(building, self.config.footprint_container)
        pos_list = _first_field(container, self.config.footprint_field) if container is not None else None
        if pos_list is None:
            pos_list = _first_field(building, self.config.footprint_field)

        text = node_text(pos_list, self.config.text_field)
        if text is None:
            return None
        try:
            vertices = parse_coordinate_or_numeric_list(text, ParsePolicy.COORDINATES)
        except ValueError:
            self.logger.warning(f"⚠️ Ungültige Koordinatenliste im Export: {text[:60]!r}")
            return None
        return format_coordinates(vertices)

def _first_field(node: Optional[GenericNode], name: str) -> Optional[GenericNode]:
    """Erster Knoten mit Feldname ``name`` in Tiefensuche."""
    if isinstance(node, MapNode):
        if node.has(name):
            items = as_list(node.get(name))
            return items[0] if items else None
    if isinstance(node, (MapNode, ListNode)):
        for child in node.children():
            found = _first_field(child, name)
            if found is not None:
                return found
    return None
