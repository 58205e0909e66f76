"""
Eingabe-Adapter für GML/XML-, JSON- und CSV-Dokumente.
"""

from .documents import load_document, load_xml_document, load_json_document, load_csv_document, parse_xml

__all__ = [
    'load_document',
    'load_xml_document',
    'load_json_document',
    'load_csv_document',
    'parse_xml',
]
