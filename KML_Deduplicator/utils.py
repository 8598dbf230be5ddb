import os
import json
from lxml import etree

OUTPUT_SUFFIX = " - Corrigido"
OUTPUT_EXTENSION = ".kml"
STAGING_SUFFIX = ".tmp"


def corrected_file_name(input_file):
    """Build the output file name: input name up to the first dot plus the suffix."""
    base_name = os.path.basename(input_file).split('.')[0]
    if not base_name:
        base_name = "corrigido"
    return f"{base_name}{OUTPUT_SUFFIX}{OUTPUT_EXTENSION}"


def serialize_kml(root):
    """Serialize a KML tree to UTF-8 bytes with an XML declaration."""
    return etree.tostring(root.getroottree(), xml_declaration=True, encoding='UTF-8')


def stage_kml_file(data, output_dir, input_file):
    """
    Write serialized KML next to its final location in output_dir.

    Returns (staged_file, output_file). The corrected file only appears
    once commit_kml_file is called.
    """
    os.makedirs(output_dir, exist_ok=True)
    output_file = os.path.join(output_dir, corrected_file_name(input_file))
    staged_file = output_file + STAGING_SUFFIX
    with open(staged_file, 'wb') as f:
        f.write(data)
    return staged_file, output_file


def commit_kml_file(staged_file, output_file):
    """Move a staged KML file into place, replacing any previous output."""
    os.replace(staged_file, output_file)
    return output_file


def discard_staged_file(staged_file):
    if os.path.exists(staged_file):
        os.remove(staged_file)


def format_report(report):
    """Render the duplicates report as indented JSON."""
    return json.dumps(report, indent=2, ensure_ascii=False)


def check_report_target(report_file):
    """Fail early when the report path cannot be a file."""
    if os.path.isdir(report_file):
        raise IsADirectoryError(f"Report path '{report_file}' is a directory")


def save_report(report, report_file):
    """Save the duplicates report as a JSON file."""
    report_dir = os.path.dirname(report_file)
    if report_dir:
        os.makedirs(report_dir, exist_ok=True)
    with open(report_file, 'w', encoding='utf-8') as f:
        f.write(format_report(report))
        f.write('\n')
    return report_file


if __name__ == "__main__":
    print("This module provides utility functions for the KML duplicate corrector.")
