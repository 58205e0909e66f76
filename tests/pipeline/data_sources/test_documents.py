"""
Tests für das Laden von Eingabedokumenten.
"""

import pytest

from pipeline.data_sources.documents import (
    load_csv_document,
    load_document,
    load_json_document,
    parse_xml,
)
from pipeline.linking.errors import DocumentLoadError
from pipeline.linking.generic_node import ListNode, MapNode, ScalarNode
from pipeline.linking.primary_key_extractor import extract_city_object_members

class TestParseXML:
    """Tests für die XML-Umwandlung."""

    def test_root_and_namespaces(self, primary_gml_content, linking_config):
        doc = parse_xml(primary_gml_content, linking_config)
        city_model = doc.get('core:CityModel')
        assert isinstance(city_model, MapNode)
        assert city_model.get_scalar('@_xmlns:bldg') == 'http://www.opengis.net/citygml/building/2.0'

    def test_repeated_children_become_list(self, primary_gml_content, linking_config):
        doc = parse_xml(primary_gml_content, linking_config)
        members = doc.get('core:CityModel').get('core:cityObjectMember')
        assert isinstance(members, ListNode)
        assert len(members) == 2
        building = members.items[0].get('bldg:Building')
        assert building.get('uro:buildingID').to_python() == ['ID-1', 'ID-1b']

    def test_attributes_and_text(self, primary_gml_content, linking_config):
        doc = parse_xml(primary_gml_content, linking_config)
        building = extract_city_object_members(doc, linking_config)[0].get('bldg:Building')
        assert building.get_scalar('@_gml:id') == 'bldg_1'
        assert building.get('bldg:measuredHeight').to_python() == {'@_uom': 'm', '#text': '12.5'}
        assert building.get('bldg:storeysAboveGround') == ScalarNode('3')
        assert building.get('gen:stringAttribute').to_python() == {
            '@_name': 'Gebäudenummer',
            'gen:value': '1001',
        }

    def test_comments_are_skipped(self, primary_gml_content, linking_config):
        doc = parse_xml(primary_gml_content, linking_config)
        keys = {key for key, _ in doc.get('core:CityModel').items()}
        assert {key for key in keys if not key.startswith('@_xmlns:')} == {'core:cityObjectMember'}

    def test_invalid_xml(self, linking_config):
        with pytest.raises(DocumentLoadError):
            parse_xml("<core:CityModel><offen>", linking_config)

def test_load_csv_keeps_strings(tmp_path):
    path = tmp_path / "plz.csv"
    path.write_text("plz,ort\n0101,Tokio\n1010,\n", encoding='utf-8')
    doc = load_csv_document(path)
    assert doc.to_python() == [{'plz': '0101', 'ort': 'Tokio'}, {'plz': '1010', 'ort': ''}]

def test_load_json(secondary_json_file):
    doc = load_json_document(secondary_json_file)
    assert doc.get('records').items[0].get_scalar('height') == 12.5

def test_load_json_invalid(tmp_path):
    path = tmp_path / "kaputt.json"
    path.write_text("{kein json", encoding='utf-8')
    with pytest.raises(DocumentLoadError):
        load_json_document(path)

def test_load_document_dispatch(primary_gml_file, secondary_csv_file, secondary_json_file, linking_config):
    assert load_document(primary_gml_file, linking_config).get('core:CityModel') is not None
    assert isinstance(load_document(secondary_csv_file, linking_config), ListNode)
    assert isinstance(load_document(secondary_json_file, linking_config), MapNode)

def test_load_document_errors(tmp_path, linking_config):
    with pytest.raises(DocumentLoadError):
        load_document(tmp_path / "fehlt.gml", linking_config)

    path = tmp_path / "daten.xlsx"
    path.write_bytes(b"")
    with pytest.raises(DocumentLoadError) as exc:
        load_document(path, linking_config)
    assert "xlsx" in str(exc.value)
