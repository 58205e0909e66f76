"""
Verknüpfung von Sekundärdaten mit CityGML-Gebäuden.
"""

from .config import LinkingConfig, load_linking_config
from .errors import (
    LinkingError,
    NoMatchFoundError,
    DocumentStructureError,
    DocumentLoadError,
    LinkingConfigError,
)
from .generic_node import GenericNode, ScalarNode, ListNode, MapNode, from_python
from .join_keys import ScalarKey, RangeKey, PolygonKey, NumberListKey, TokenKey, PrimaryKeyResult
from .key_extractor import KeyedRecord, extract_keys
from .primary_key_extractor import extract_primary_key, extract_primary_keys, extract_city_object_members
from .matcher import MatchedPair, match_pairs
from .document_merger import AttributeMapping, merge_matches
from .column_resolver import ColumnResolver
from .tag_collector import collect_tags, collect_primary_tags
from .linker import AttributeLinker, LinkingResult, link_documents

__all__ = [
    'LinkingConfig',
    'load_linking_config',
    'LinkingError',
    'NoMatchFoundError',
    'DocumentStructureError',
    'DocumentLoadError',
    'LinkingConfigError',
    'GenericNode',
    'ScalarNode',
    'ListNode',
    'MapNode',
    'from_python',
    'ScalarKey',
    'RangeKey',
    'PolygonKey',
    'NumberListKey',
    'TokenKey',
    'PrimaryKeyResult',
    'KeyedRecord',
    'extract_keys',
    'extract_primary_key',
    'extract_primary_keys',
    'extract_city_object_members',
    'MatchedPair',
    'match_pairs',
    'AttributeMapping',
    'merge_matches',
    'ColumnResolver',
    'collect_tags',
    'collect_primary_tags',
    'AttributeLinker',
    'LinkingResult',
    'link_documents',
]
