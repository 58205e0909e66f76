# pipeline/output/writer.py

"""
Output-Writer für die Verknüpfungs-Pipeline.

Dieses Modul serialisiert angereicherte Dokumente zurück nach GML und
Exporttabellen als CSV.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from lxml import etree

from pipeline.linking.config import LinkingConfig, load_linking_config
from pipeline.linking.errors import LinkingError
from pipeline.linking.generic_node import GenericNode, ListNode, MapNode, ScalarNode, scalar_text

# Logger konfigurieren
logger = logging.getLogger(__name__)

# Reservierter Namespace des Präfixes xml (nie in nsmap)
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

class GMLBuilder:
    """Baut einen lxml-Elementbaum aus einem generischen Dokument."""

    def __init__(self, config: Optional[LinkingConfig] = None):
        self.config = config or load_linking_config()
        self.xmlns_prefix = f"{self.config.attribute_prefix}xmlns"

    def build(self, doc: GenericNode) -> etree._Element:
        """Erzeugt das Wurzelelement.

        Raises:
            LinkingError: Wenn das Dokument nicht genau ein Wurzelelement hat
        """
        if not isinstance(doc, MapNode) or len(doc.fields) != 1:
            raise LinkingError("Dokument muss genau ein Wurzelelement enthalten", "build_gml")
        name, node = next(doc.items())
        return self._element(None, name, node, {})

    def _declarations(self, node: GenericNode) -> Dict[Optional[str], str]:
        declarations: Dict[Optional[str], str] = {}
        if not isinstance(node, MapNode):
            return declarations
        for key, value in node.items():
            if key == self.xmlns_prefix:
                declarations[None] = str(value.to_python())
            elif key.startswith(f"{self.xmlns_prefix}:"):
                declarations[key[len(self.xmlns_prefix) + 1:]] = str(value.to_python())
        return declarations

    def _resolve(self, name: str, nsmap: Dict[Optional[str], str]) -> str:
        """``prefix:local`` -> Clark-Notation ``{uri}local``."""
        if ':' in name:
            prefix, local = name.split(':', 1)
            if prefix in nsmap:
                return f"{{{nsmap[prefix]}}}{local}"
            if prefix == 'xml':
                return f"{{{XML_NAMESPACE}}}{local}"
            logger.warning(f"⚠️ Unbekanntes Namespace-Präfix '{prefix}', verwende '{local}'")
            return local
        if None in nsmap:
            return f"{{{nsmap[None]}}}{name}"
        return name

    def _element(self, parent: Optional[etree._Element], name: str, node: GenericNode,
                 inherited: Dict[Optional[str], str]) -> etree._Element:
        declarations = self._declarations(node)
        nsmap = {**inherited, **declarations}
        tag = self._resolve(name, nsmap)

        if parent is None:
            element = etree.Element(tag, nsmap=declarations or None)
        else:
            element = etree.SubElement(parent, tag, nsmap=declarations or None)

        if isinstance(node, ScalarNode):
            element.text = scalar_text(node.value)
            return element

        if isinstance(node, MapNode):
            for key, value in node.items():
                if key == self.xmlns_prefix or key.startswith(f"{self.xmlns_prefix}:"):
                    continue
                if key.startswith(self.config.attribute_prefix):
                    attribute = key[len(self.config.attribute_prefix):]
                    # Attribute ohne Präfix liegen im leeren Namespace
                    attribute = self._resolve(attribute, nsmap) if ':' in attribute else attribute
                    element.set(attribute, scalar_text(value.to_python()) or '')
                elif key == self.config.text_field:
                    element.text = scalar_text(value.to_python())
                else:
                    self._children(element, key, value, nsmap)
        return element

    def _children(self, element: etree._Element, name: str, node: GenericNode,
                  nsmap: Dict[Optional[str], str]) -> None:
        if isinstance(node, ListNode):
            for item in node.items:
                self._children(element, name, item, nsmap)
        else:
            self._element(element, name, node, nsmap)

def build_gml(doc: GenericNode, config: Optional[LinkingConfig] = None) -> bytes:
    """Serialisiert ein Dokument als XML-Bytes (UTF-8, mit Deklaration)."""
    root = GMLBuilder(config).build(doc)
    return etree.tostring(root, pretty_print=True, xml_declaration=True, encoding='UTF-8')

def write_gml(doc: GenericNode, output_path: Union[str, Path],
              config: Optional[LinkingConfig] = None) -> Path:
    """Speichert ein Dokument als GML-Datei.

    Args:
        doc: Angereichertes Dokument
        output_path: Zielpfad

    Returns:
        Pfad der geschriebenen Datei
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(build_gml(doc, config))
    logger.info(f"✅ GML gespeichert: {output_path}")
    return output_path

def format_csv(rows: Sequence[Sequence[str]]) -> str:
    """Zeilen mit Komma verbinden, Zeilen mit Zeilenumbruch (ohne Quoting)."""
    return '\n'.join(','.join(row) for row in rows)

def write_csv(rows: List[List[str]], output_path: Union[str, Path]) -> Path:
    """Speichert eine Exporttabelle als CSV-Datei."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8', newline='') as f:
        f.write(format_csv(rows))
    logger.info(f"✅ CSV gespeichert: {output_path} ({max(len(rows) - 1, 0)} Zeilen)")
    return output_path
