"""
Übernahme verknüpfter Sekundärwerte in das Primärdokument.

Arbeitet auf einer tiefen Kopie; das übergebene Dokument bleibt unverändert.
Neue Werte werden als generische Attribute an das Gebäude angehängt.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

from .config import LinkingConfig, load_linking_config
from .generic_node import GenericNode, ListNode, MapNode, ScalarNode, as_list, is_empty
from .matcher import MatchedPair

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class AttributeMapping:
    """Sekundärfeld -> Name des neuen generischen Attributs."""
    source_field: str
    target_attribute_name: str

def find_buildings(node: GenericNode, building_id: str, config: LinkingConfig) -> Iterator[MapNode]:
    """Alle Building-Elemente mit der gegebenen gml:id (tiefe Suche)."""
    if isinstance(node, MapNode):
        for building in as_list(node.get(config.building_field)):
            if not isinstance(building, MapNode):
                continue
            identifier = building.get_scalar(config.id_attribute)
            if identifier is not None and str(identifier) == building_id:
                yield building
    for child in node.children():
        if isinstance(child, (MapNode, ListNode)):
            yield from find_buildings(child, building_id, config)

def generic_attribute_list(building: MapNode, config: LinkingConfig) -> ListNode:
    """Liste der generischen Attribute; wird bei Bedarf angelegt bzw. aus einem
    Einzelattribut hochgestuft, ohne bestehende Einträge zu verlieren."""
    existing = building.get(config.generic_attribute_field)
    if isinstance(existing, ListNode):
        return existing
    attributes = ListNode([] if existing is None else [existing])
    building.set(config.generic_attribute_field, attributes)
    return attributes

def append_generic_attribute(building: MapNode, name: str, value: GenericNode,
                             config: LinkingConfig) -> None:
    attributes = generic_attribute_list(building, config)
    attributes.items.append(MapNode({
        config.generic_name_attribute: ScalarNode(name),
        config.generic_value_field: copy.deepcopy(value),
    }))

def merge_matches(primary_doc: GenericNode, pairs: Sequence[MatchedPair],
                  mappings: Sequence[AttributeMapping],
                  config: Optional[LinkingConfig] = None) -> GenericNode:
    """Hängt die zugeordneten Sekundärwerte an die verknüpften Gebäude an.

    Args:
        primary_doc: Original-Primärdokument (wird nicht verändert)
        pairs: Verknüpfte Paare
        mappings: Welche Sekundärfelder als welche Attribute übernommen werden

    Returns:
        Angereicherte Kopie des Primärdokuments
    """
    config = config or load_linking_config()
    merged = copy.deepcopy(primary_doc)
    added = 0

    for pair in pairs:
        buildings = list(find_buildings(merged, pair.building_id, config))
        if not buildings:
            logger.warning(f"⚠️ Gebäude {pair.building_id} nicht im Dokument gefunden")
            continue
        for building in buildings:
            for mapping in mappings:
                value = pair.matched_record.get(mapping.source_field)
                if is_empty(value):
                    continue
                append_generic_attribute(building, mapping.target_attribute_name, value, config)
                added += 1

    logger.info(f"✅ {added} Attribute an {len({p.building_id for p in pairs})} Gebäude angehängt")
    return merged
