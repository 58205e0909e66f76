from .writer import build_gml, write_gml, format_csv, write_csv

__all__ = ['build_gml', 'write_gml', 'format_csv', 'write_csv']
