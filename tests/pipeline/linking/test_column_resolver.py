"""
Tests für die Spaltenauflösung des tabellarischen Exports.
"""

import unittest

from pipeline.linking.column_resolver import ColumnResolver, FieldRequest
from pipeline.linking.config import LinkingConfig
from pipeline.linking.generic_node import from_python
from pipeline.linking.primary_key_extractor import extract_city_object_members
from tests.fixtures.linking_fixtures import SQUARE_1, make_building, make_city_model

class TestFieldRequest(unittest.TestCase):

    def test_plain_field(self):
        self.assertEqual(FieldRequest.parse('gml:id', '@='), FieldRequest('gml:id', 'gml:id'))

    def test_qualified_field(self):
        request = FieldRequest.parse('bldg:measuredHeight@=m', '@=')
        self.assertEqual((request.tag, request.qualifier), ('bldg:measuredHeight', 'm'))

class TestColumnResolver(unittest.TestCase):
    """Tests für ColumnResolver."""

    def setUp(self):
        self.resolver = ColumnResolver(LinkingConfig())
        self.doc = make_city_model(
            make_building(
                'bldg_1',
                pos_list=SQUARE_1,
                height='12.5',
                **{
                    'gen:stringAttribute': {'@_name': 'Gebäudenummer', 'gen:value': '1001'},
                    'bldg:storeysBelowGround': 0,
                    'uro:buildingID': ['ID-1', 'ID-1b'],
                }
            ),
            make_building(
                'bldg_2',
                height='8',
                **{'bldg:usage': {'@_codeSpace': '../../codelists/Building_usage.xml', '#text': '411'}}
            ),
        )
        self.buildings = extract_city_object_members(self.doc, self.resolver.config)

    def test_gml_id_row(self):
        building = from_python({'bldg:Building': {'@_gml:id': 'b42'}})
        self.assertEqual(self.resolver.resolve_row(building, ['gml:id']), ['b42'])
        self.assertEqual(self.resolver.resolve_row(building.get('bldg:Building'), ['gml:id']), ['b42'])

    def test_missing_field_is_empty_string(self):
        row = self.resolver.resolve_row(self.buildings[1], ['gml:id', 'bldg:roofType'])
        self.assertEqual(row, ['bldg_2', ''])

    def test_zero_is_kept(self):
        """Test: Der Wert 0 wird zum String '0' und nicht als leer behandelt."""
        self.assertEqual(self.resolver.resolve_row(self.buildings[0], ['bldg:storeysBelowGround']), ['0'])

    def test_inline_text(self):
        self.assertEqual(self.resolver.resolve_row(self.buildings[0], ['bldg:measuredHeight']), ['12.5'])

    def test_generic_attribute_name(self):
        self.assertEqual(self.resolver.resolve_row(self.buildings[0], ['Gebäudenummer']), ['1001'])

    def test_qualified_fields(self):
        row = self.resolver.resolve_row(self.buildings[1], [
            'bldg:usage@=../../codelists/Building_usage.xml',
            'bldg:measuredHeight@=m',
            'bldg:measuredHeight@=ft',
        ])
        self.assertEqual(row, ['411', '8', ''])

    def test_footprint_without_elevation(self):
        row = self.resolver.resolve_row(self.buildings[0], ['gml:posList'])
        self.assertEqual(row, ['0 0 0 10 10 10 10 0'])

    def test_overflow_values_in_row(self):
        row = self.resolver.resolve_row(self.buildings[0], ['uro:buildingID', 'gml:id'])
        self.assertEqual(row, ['ID-1', 'bldg_1', 'ID-1b'])

    def test_table_with_overflow_header(self):
        """Test: Mehrfachwerte erweitern die Kopfzeile mit fortlaufender Nummer."""
        table = self.resolver.resolve_table(self.buildings, ['gml:id', 'uro:buildingID'])
        self.assertEqual(table, [
            ['gml:id', 'uro:buildingID', 'uro:buildingID_2'],
            ['bldg_1', 'ID-1', 'ID-1b'],
            ['bldg_2', '', ''],
        ])

    def test_rows_follow_document_order(self):
        table = self.resolver.resolve_table(self.buildings, ['gml:id'])
        self.assertEqual([row[0] for row in table[1:]], ['bldg_1', 'bldg_2'])

    def test_column_labels(self):
        resolver = ColumnResolver(LinkingConfig({'export': {'column_labels': {'gml:id': 'GML ID'}}}))
        table = resolver.resolve_table(self.buildings, ['gml:id', 'gml:id'])
        self.assertEqual(table[0], ['GML ID', 'GML ID_2'])

if __name__ == '__main__':
    unittest.main()
