# Import key modules to make them accessible at the package level
from .kml_parser import (parse_kml_file, parse_kml_content, find_placemarks,
                         index_simple_data, diagnose_kml, KMLParseError)
from .deduplicator import (create_parent_key, group_placemarks, rename_duplicates,
                           fix_duplicate_names, process_and_fix_kml,
                           DEFAULT_ATTRIBUTES, DEFAULT_OUTPUT_DIR)
from .utils import corrected_file_name, serialize_kml, save_report

__all__ = [
    'parse_kml_file',
    'parse_kml_content',
    'find_placemarks',
    'index_simple_data',
    'diagnose_kml',
    'KMLParseError',
    'create_parent_key',
    'group_placemarks',
    'rename_duplicates',
    'fix_duplicate_names',
    'process_and_fix_kml',
    'DEFAULT_ATTRIBUTES',
    'DEFAULT_OUTPUT_DIR',
    'corrected_file_name',
    'serialize_kml',
    'save_report'
]
