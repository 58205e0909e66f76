"""
Tests für die GML- und CSV-Ausgabe.
"""

import pytest
from lxml import etree

from pipeline.data_sources.documents import parse_xml
from pipeline.linking.document_merger import AttributeMapping, merge_matches
from pipeline.linking.errors import LinkingError
from pipeline.linking.generic_node import from_python
from pipeline.linking.matcher import MatchedPair
from pipeline.output.writer import build_gml, format_csv, write_csv, write_gml

GEN_NS = 'http://www.opengis.net/citygml/generics/2.0'
GML_NS = 'http://www.opengis.net/gml'
XML_NS = 'http://www.w3.org/XML/1998/namespace'

def test_gml_roundtrip(primary_gml_content, linking_config):
    """Test: Schreiben und erneutes Einlesen ergibt denselben Baum."""
    doc = parse_xml(primary_gml_content, linking_config)
    assert parse_xml(build_gml(doc, linking_config), linking_config).to_python() == doc.to_python()

def test_xml_lang_keeps_namespace(linking_config):
    """Test: xml:lang bleibt beim Lesen und Schreiben im xml-Namespace."""
    content = (
        '<core:CityModel xmlns:core="http://www.opengis.net/citygml/2.0" xmlns:gml="http://www.opengis.net/gml">'
        '<gml:name xml:lang="ja">Test</gml:name></core:CityModel>'
    )
    doc = parse_xml(content, linking_config)
    assert doc.get('core:CityModel').get('gml:name').to_python() == {'@_xml:lang': 'ja', '#text': 'Test'}

    output = build_gml(doc, linking_config)
    assert b'xml:lang="ja"' in output
    name = etree.fromstring(output).find(f'{{{GML_NS}}}name')
    assert name.get(f'{{{XML_NS}}}lang') == 'ja'
    assert parse_xml(output, linking_config).to_python() == doc.to_python()

def test_merged_attribute_is_written(primary_gml_content, linking_config):
    doc = parse_xml(primary_gml_content, linking_config)
    record = from_python({'name': 'Cafe'})
    merged = merge_matches(
        doc,
        [MatchedPair('bldg_2', record)],
        [AttributeMapping(source_field='name', target_attribute_name='shopName')],
        linking_config,
    )
    root = etree.fromstring(build_gml(merged, linking_config))
    building = root.xpath('//*[@gml:id="bldg_2"]', namespaces={'gml': GML_NS})[0]
    attribute = building.find(f'{{{GEN_NS}}}stringAttribute')
    assert attribute.get('name') == 'shopName'
    assert attribute.findtext(f'{{{GEN_NS}}}value') == 'Cafe'

def test_build_gml_requires_single_root(linking_config):
    with pytest.raises(LinkingError):
        build_gml(from_python({'a': '1', 'b': '2'}), linking_config)

def test_write_gml(tmp_path, primary_gml_content, linking_config):
    output_path = write_gml(parse_xml(primary_gml_content, linking_config), tmp_path / "out" / "linked.gml",
                            linking_config)
    assert output_path.exists()
    assert output_path.read_bytes().startswith(b"<?xml")

def test_format_csv():
    rows = [['gml:id', 'Höhe'], ['bldg_1', '12.5'], ['bldg_2', '']]
    assert format_csv(rows) == "gml:id,Höhe\nbldg_1,12.5\nbldg_2,"

def test_write_csv(tmp_path):
    output_path = write_csv([['a', 'b'], ['1', '2']], tmp_path / "export.csv")
    assert output_path.read_text(encoding='utf-8') == "a,b\n1,2"
