"""
Tests für die Schlüsselextraktion aus CityGML-Primärdokumenten.
"""

import pytest

from pipeline.linking.config import LinkingConfig
from pipeline.linking.errors import DocumentStructureError
from pipeline.linking.generic_node import from_python
from pipeline.linking.join_keys import PolygonKey, RangeKey, ScalarKey
from pipeline.linking.primary_key_extractor import (
    extract_city_object_members,
    extract_primary_key,
    extract_primary_keys,
)

@pytest.fixture
def first_member(primary_doc, linking_config):
    return extract_city_object_members(primary_doc, linking_config)[0]

def test_gml_id(first_member, linking_config):
    result = extract_primary_key(first_member, 'gml:id', config=linking_config)
    assert result.key == ScalarKey('bldg_1')
    assert result.building_id == 'bldg_1'

def test_measured_height_inline_text(first_member, linking_config):
    result = extract_primary_key(first_member, 'bldg:measuredHeight', config=linking_config)
    assert result.key == ScalarKey('12.5')

def test_locality_name(first_member, linking_config):
    result = extract_primary_key(first_member, 'xAL:LocalityName', config=linking_config)
    assert result.key == ScalarKey('Wien')

def test_generic_attribute_by_name(first_member, linking_config):
    """Test: Generisches Attribut wird über sein name-Attribut gefunden."""
    result = extract_primary_key(first_member, 'Gebäudenummer', config=linking_config)
    assert result.key == ScalarKey('1001')
    assert result.building_id == 'bldg_1'

def test_footprint_polygon(first_member, linking_config):
    """Test: posList-Tripel werden zu 2D-Eckpunkten."""
    result = extract_primary_key(first_member, 'gml:posList', config=linking_config)
    assert result.key == PolygonKey(((0, 0), (0, 10), (10, 10), (10, 0)))

def test_footprint_range_mode(first_member):
    config = LinkingConfig({'matching': {'footprint_key_mode': 'range'}})
    result = extract_primary_key(first_member, 'gml:posList', config=config)
    assert result.key == RangeKey(0, 20)

def test_other_string_field(first_member, linking_config):
    result = extract_primary_key(first_member, 'bldg:storeysAboveGround', config=linking_config)
    assert result.key == ScalarKey('3')

def test_missing_field_returns_sentinel(first_member, linking_config):
    """Test: Fehlendes Feld ist kein Fehler, sondern ein leerer Schlüssel."""
    result = extract_primary_key(first_member, 'uro:doesNotExist', config=linking_config)
    assert result.key is None
    assert result.building_id == 'bldg_1'
    assert not result.is_usable

def test_building_id_accumulator(linking_config):
    fragment = from_python({'wrapper': {'name': 'Halle'}})
    result = extract_primary_key(fragment, 'name', building_id='outer', config=linking_config)
    assert result.key == ScalarKey('Halle')
    assert result.building_id == 'outer'

def test_deeper_building_overrides_id(linking_config):
    fragment = from_python({'bldg:Building': {
        '@_gml:id': 'outer',
        'bldg:consistsOfBuildingPart': {'bldg:Building': {'@_gml:id': 'inner', 'name': 'Anbau'}},
    }})
    result = extract_primary_key(fragment, 'name', config=linking_config)
    assert result.key == ScalarKey('Anbau')
    assert result.building_id == 'inner'

def test_extract_primary_keys_per_member(primary_doc, linking_config):
    results = extract_primary_keys(primary_doc, 'bldg:measuredHeight', linking_config)
    assert [(r.building_id, r.key) for r in results] == [
        ('bldg_1', ScalarKey('12.5')),
        ('bldg_2', ScalarKey('8')),
    ]

def test_missing_city_model_raises(linking_config):
    with pytest.raises(DocumentStructureError):
        extract_city_object_members(from_python({'shops': []}), linking_config)
