"""
Laden von Eingabedokumenten als generischer Dokumentbaum.

XML/GML wird mit lxml gelesen. Elementnamen bleiben qualifiziert
(``bldg:Building``), Attribute erhalten das Präfix ``@_`` und der Textinhalt
von Elementen mit Attributen liegt unter ``#text``. Wiederholte Kindelemente
werden zu Listen zusammengefasst. Namespace-Deklarationen bleiben als
``@_xmlns:prefix`` erhalten, damit das Dokument wieder geschrieben werden kann.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

import pandas as pd
from lxml import etree

from pipeline.linking.config import LinkingConfig, load_linking_config
from pipeline.linking.errors import DocumentLoadError
from pipeline.linking.generic_node import GenericNode, ListNode, MapNode, ScalarNode, from_python

logger = logging.getLogger(__name__)

XML_SUFFIXES = ('.gml', '.xml')
JSON_SUFFIXES = ('.json', '.geojson')
CSV_SUFFIXES = ('.csv',)
XML_NAMESPACE = 'http://www.w3.org/XML/1998/namespace'

def _qualified_name(name: str, nsmap: Dict[Optional[str], str]) -> str:
    """``{uri}local`` -> ``prefix:local`` anhand der gültigen Namespaces."""
    qname = etree.QName(name)
    if qname.namespace is None:
        return qname.localname
    if qname.namespace == XML_NAMESPACE:
        return f"xml:{qname.localname}"
    for prefix, uri in nsmap.items():
        if prefix and uri == qname.namespace:
            return f"{prefix}:{qname.localname}"
    return qname.localname

def _namespace_declarations(element: etree._Element) -> Dict[str, str]:
    parent = element.getparent()
    inherited = parent.nsmap if parent is not None else {}
    declarations = {}
    for prefix, uri in element.nsmap.items():
        if inherited.get(prefix) != uri:
            declarations['xmlns' if prefix is None else f"xmlns:{prefix}"] = uri
    return declarations

def element_to_node(element: etree._Element, config: Optional[LinkingConfig] = None) -> GenericNode:
    """Wandelt ein lxml-Element (ohne seinen eigenen Namen) in einen Knoten um."""
    config = config or load_linking_config()
    prefix = config.attribute_prefix

    fields: Dict[str, GenericNode] = {}
    for name, uri in _namespace_declarations(element).items():
        fields[f"{prefix}{name}"] = ScalarNode(uri)
    for name, value in element.attrib.items():
        fields[f"{prefix}{_qualified_name(name, element.nsmap)}"] = ScalarNode(value)

    children = [child for child in element if isinstance(child.tag, str)]
    text = (element.text or '').strip()

    if not children and not fields:
        return ScalarNode(text)

    for child in children:
        name = _qualified_name(child.tag, child.nsmap)
        node = element_to_node(child, config)
        existing = fields.get(name)
        if existing is None:
            fields[name] = node
        elif isinstance(existing, ListNode):
            existing.items.append(node)
        else:
            fields[name] = ListNode([existing, node])

    if text:
        fields[config.text_field] = ScalarNode(text)
    return MapNode(fields)

def parse_xml(content: Union[str, bytes], config: Optional[LinkingConfig] = None) -> GenericNode:
    """Parst XML-Text zu einem Dokument ``{root_name: root_node}``.

    Raises:
        DocumentLoadError: Bei ungültigem XML
    """
    if isinstance(content, str):
        content = content.encode('utf-8')
    parser = etree.XMLParser(remove_comments=True, resolve_entities=False, huge_tree=True)
    try:
        root = etree.fromstring(content, parser)
    except etree.XMLSyntaxError as e:
        raise DocumentLoadError("Ungültiges XML", "parse_xml", e)
    return MapNode({_qualified_name(root.tag, root.nsmap): element_to_node(root, config)})

def load_xml_document(path: Union[str, Path], config: Optional[LinkingConfig] = None) -> GenericNode:
    """Lädt eine GML/XML-Datei."""
    path = Path(path)
    logger.info(f"📂 Lade XML-Dokument: {path.name}")
    try:
        content = path.read_bytes()
    except OSError as e:
        raise DocumentLoadError(f"Datei nicht lesbar: {path}", "load_xml_document", e)
    return parse_xml(content, config)

def load_json_document(path: Union[str, Path]) -> GenericNode:
    """Lädt eine JSON/GeoJSON-Datei."""
    path = Path(path)
    logger.info(f"📂 Lade JSON-Dokument: {path.name}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise DocumentLoadError(f"Datei nicht lesbar: {path}", "load_json_document", e)
    except json.JSONDecodeError as e:
        raise DocumentLoadError(f"Ungültiges JSON: {path}", "load_json_document", e)
    return from_python(data)

def load_csv_document(path: Union[str, Path]) -> GenericNode:
    """Lädt eine CSV-Datei als Liste von Zeilen; alle Werte bleiben Strings."""
    path = Path(path)
    logger.info(f"📂 Lade CSV-Dokument: {path.name}")
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    except OSError as e:
        raise DocumentLoadError(f"Datei nicht lesbar: {path}", "load_csv_document", e)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise DocumentLoadError(f"Ungültiges CSV: {path}", "load_csv_document", e)

    df.columns = [str(column).strip() for column in df.columns]
    logger.info(f"📊 {len(df)} Zeilen, {len(df.columns)} Spalten")
    return from_python(df.to_dict(orient='records'))

def load_document(path: Union[str, Path], config: Optional[LinkingConfig] = None) -> GenericNode:
    """Lädt ein Dokument anhand der Dateiendung.

    Raises:
        DocumentLoadError: Bei fehlender Datei oder unbekannter Endung
    """
    path = Path(path)
    if not path.exists():
        raise DocumentLoadError(f"Datei nicht gefunden: {path}", "load_document")

    suffix = path.suffix.lower()
    if suffix in XML_SUFFIXES:
        return load_xml_document(path, config)
    if suffix in JSON_SUFFIXES:
        return load_json_document(path)
    if suffix in CSV_SUFFIXES:
        return load_csv_document(path)
    raise DocumentLoadError(f"Nicht unterstütztes Dateiformat: {suffix}", "load_document")
