"""
Sammlung auswählbarer Feldnamen eines Dokuments.

Liefert die Feldnamen, die als Verknüpfungsschlüssel, Quellfeld oder
Exportspalte angegeben werden können.
"""

from typing import Dict, List, Optional

from .config import LinkingConfig, load_linking_config
from .generic_node import GenericNode, ListNode, MapNode, ScalarNode

def collect_tags(doc: GenericNode, config: Optional[LinkingConfig] = None) -> List[str]:
    """Feldnamen mit Skalarwerten eines beliebigen Sekundärdokuments.

    Attribute und Textfelder werden ausgelassen. Reihenfolge des ersten Auftretens.
    """
    config = config or load_linking_config()
    tags: Dict[str, None] = {}

    def visit(node: GenericNode) -> None:
        if isinstance(node, ListNode):
            for item in node.items:
                visit(item)
        elif isinstance(node, MapNode):
            for key, value in node.items():
                if isinstance(value, (MapNode, ListNode)):
                    if isinstance(value, MapNode) and value.has(config.text_field):
                        tags.setdefault(key)
                    visit(value)
                elif not key.startswith(config.attribute_prefix) and key != config.text_field:
                    tags.setdefault(key)

    visit(doc)
    return list(tags)

def collect_primary_tags(doc: GenericNode, config: Optional[LinkingConfig] = None,
                         include_qualified: bool = True) -> List[str]:
    """Auswählbare Felder eines CityGML-Dokuments.

    Enthält ``gml:id`` (falls Gebäude-IDs vorhanden), die Namen generischer
    Attribute und Blattfelder. Mit ``include_qualified`` kommen qualifizierte
    Felder ``tag@=wert`` für Elemente mit codeSpace- oder uom-Attribut hinzu;
    diese sind nur als Exportspalten auflösbar, nicht als Verknüpfungsschlüssel.
    """
    config = config or load_linking_config()
    tags: Dict[str, None] = {}
    separator = config.qualifier_separator

    def visit(node: GenericNode) -> None:
        if isinstance(node, ListNode):
            for item in node.items:
                visit(item)
            return
        if not isinstance(node, MapNode):
            return

        for key, value in node.items():
            if key == config.id_attribute and isinstance(value, ScalarNode):
                tags.setdefault(config.id_field)
            elif key == config.generic_name_attribute and isinstance(value, ScalarNode):
                tags.setdefault(str(value.value))
            elif key.startswith(config.attribute_prefix) or key in (config.text_field, config.generic_value_field):
                continue
            elif isinstance(value, ScalarNode):
                tags.setdefault(key)
            else:
                for item in ([value] if isinstance(value, MapNode) else value.items):
                    if isinstance(item, MapNode) and item.has(config.text_field):
                        tags.setdefault(key)
                        if not include_qualified:
                            continue
                        for attribute in config.qualifier_attributes:
                            qualifier = item.get_scalar(attribute)
                            if qualifier is not None:
                                tags.setdefault(f"{key}{separator}{qualifier}")
                    elif isinstance(item, ScalarNode):
                        tags.setdefault(key)
                visit(value)

    visit(doc)
    return list(tags)
