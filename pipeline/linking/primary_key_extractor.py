"""
Schlüsselextraktion für CityGML-Primärdokumente.

Durchläuft die cityObjectMember eines CityGML-Dokuments und liefert je
Gebäude den Schlüssel des Zielfeldes zusammen mit der gml:id des
umschließenden Gebäudes.
"""

import logging
from typing import List, Optional

from .config import LinkingConfig, load_linking_config
from .coordinates import (
    footprint_is_valid,
    parse_coordinate_or_numeric_list,
    value_range,
    ParsePolicy,
)
from .errors import DocumentStructureError
from .generic_node import GenericNode, ListNode, MapNode, ScalarNode, as_list, node_text
from .join_keys import JoinKey, PolygonKey, PrimaryKeyResult, RangeKey, ScalarKey

logger = logging.getLogger(__name__)

def extract_city_object_members(doc: GenericNode, config: Optional[LinkingConfig] = None) -> List[GenericNode]:
    """Gibt die cityObjectMember in Dokumentreihenfolge zurück.

    Raises:
        DocumentStructureError: Wenn kein CityModel vorhanden ist
    """
    config = config or load_linking_config()
    if not isinstance(doc, MapNode) or not isinstance(doc.get(config.city_model_field), MapNode):
        raise DocumentStructureError(
            f"Kein '{config.city_model_field}' im Primärdokument", "extract_city_object_members"
        )
    city_model = doc.get(config.city_model_field)
    return as_list(city_model.get(config.member_field))

def building_id_of(node: MapNode, config: LinkingConfig) -> Optional[str]:
    """gml:id eines direkt enthaltenen Building-Elements, sonst None."""
    building = node.get(config.building_field)
    if isinstance(building, ListNode):
        # Mehrere Gebäude auf einer Ebene: das erste mit ID gilt
        for item in building.items:
            if isinstance(item, MapNode) and item.get_scalar(config.id_attribute) is not None:
                building = item
                break
    if not isinstance(building, MapNode):
        return None
    value = building.get_scalar(config.id_attribute)
    return str(value) if value is not None else None

def footprint_key(value: GenericNode, config: LinkingConfig) -> Optional[JoinKey]:
    """Schlüssel aus einer gml:posList je nach ``footprint_key_mode``."""
    text = node_text(value, config.text_field)
    if text is None:
        return None
    try:
        if config.footprint_key_mode == 'range':
            bounds = value_range(parse_coordinate_or_numeric_list(text, ParsePolicy.PAIR_SUMS))
            return RangeKey(*bounds) if bounds is not None else None
        vertices = parse_coordinate_or_numeric_list(text, ParsePolicy.COORDINATES)
    except ValueError:
        logger.warning(f"⚠️ Ungültige Koordinatenliste übersprungen: {text[:60]!r}")
        return None

    if not vertices:
        return None
    if len(vertices) >= 3:
        footprint_is_valid(vertices)
    return PolygonKey(tuple(vertices))

def _fast_path_key(node: MapNode, target_field: str, building_id: Optional[str],
                   config: LinkingConfig) -> Optional[JoinKey]:
    """Feldspezifische Abkürzungen vor der generischen Suche."""
    if target_field == config.id_field and node.has(config.building_field):
        return ScalarKey(building_id) if building_id is not None else None

    if target_field in (config.height_field, config.locality_field) and node.has(target_field):
        text = node_text(node.get(target_field), config.text_field)
        return ScalarKey(text) if text is not None else None

    if node.get_scalar(config.generic_name_attribute) == target_field:
        value = node.get(config.generic_value_field)
        text = node_text(value, config.text_field)
        return ScalarKey(text) if text is not None else None

    if node.has(target_field):
        value = node.get(target_field)
        if target_field == config.footprint_field:
            return footprint_key(value, config)
        if isinstance(value, ScalarNode) and value.value is not None:
            return ScalarKey(value.value)

    return None

def extract_primary_key(fragment: GenericNode, target_field: str,
                        building_id: Optional[str] = None,
                        config: Optional[LinkingConfig] = None) -> PrimaryKeyResult:
    """Sucht den Schlüssel des Zielfeldes unterhalb eines Gebäudefragments.

    Args:
        fragment: Teilbaum, typischerweise ein cityObjectMember
        target_field: Gesuchtes Feld
        building_id: gml:id des umschließenden Gebäudes (Akkumulator)
        config: Verknüpfungs-Konfiguration

    Returns:
        PrimaryKeyResult; ``key`` ist None, wenn unterhalb nichts gefunden wurde
    """
    config = config or load_linking_config()

    if not isinstance(fragment, (MapNode, ListNode)):
        return PrimaryKeyResult(key=None, building_id=building_id)

    if isinstance(fragment, MapNode):
        building_id = building_id_of(fragment, config) or building_id
        key = _fast_path_key(fragment, target_field, building_id, config)
        if key is not None:
            return PrimaryKeyResult(key=key, building_id=building_id)

    for child in fragment.children():
        if isinstance(child, (MapNode, ListNode)):
            result = extract_primary_key(child, target_field, building_id, config)
            if result.key is not None:
                return result

    return PrimaryKeyResult(key=None, building_id=building_id)

def extract_primary_keys(doc: GenericNode, target_field: str,
                         config: Optional[LinkingConfig] = None) -> List[PrimaryKeyResult]:
    """Schlüssel aller cityObjectMember eines Primärdokuments."""
    config = config or load_linking_config()
    members = extract_city_object_members(doc, config)
    results = [extract_primary_key(member, target_field, config=config) for member in members]

    missing = sum(1 for result in results if result.key is None)
    if missing:
        logger.info(f"ℹ️ {missing} von {len(results)} Gebäuden ohne Wert für '{target_field}'")
    return results
