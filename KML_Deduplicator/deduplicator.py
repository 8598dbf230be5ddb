"""
Duplicate plot name correction for KML placemarks.

Placemarks are grouped by the values of a list of SimpleData fields (the
attribute path). The last field in the path is the plot name. Inside each
group, every occurrence of a repeated plot name is renamed to
"<name> - <n>", numbering from 1, and a report of the changes is returned.
"""

import traceback
from collections import namedtuple

from .kml_parser import (parse_kml_file, find_placemarks, index_simple_data,
                         field_text, set_field_text)
from .utils import (serialize_kml, stage_kml_file, commit_kml_file, discard_staged_file,
                    check_report_target, save_report, format_report)

DEFAULT_ATTRIBUTES = ["NOME_FAZ", "ZONA", "TALHAO"]
DEFAULT_OUTPUT_DIR = "./output"
KEY_SEPARATOR = "|"

# One placemark that survived the scan: its plot name, the live SimpleData
# element holding it and the group key
PlacemarkRecord = namedtuple('PlacemarkRecord', ['plotname', 'field', 'parent_key'])


def create_parent_key(attributes, fields):
    """Join the attribute values of a placemark, or None if any is missing or blank."""
    values = []
    for attr_name in attributes:
        value = field_text(fields.get(attr_name))
        if not value:
            return None
        values.append(value)
    return KEY_SEPARATOR.join(values)


def group_placemarks(root, attributes):
    """Scan placemarks in document order and group them by parent key."""
    leaf_name = attributes[-1]
    groups = {}

    for placemark in find_placemarks(root):
        fields = index_simple_data(placemark)

        plotname = field_text(fields.get(leaf_name))
        if not plotname:
            continue

        parent_key = create_parent_key(attributes, fields)
        if parent_key is None:
            continue

        groups.setdefault(parent_key, []).append(
            PlacemarkRecord(plotname, fields[leaf_name], parent_key))

    return groups


def rename_duplicates(groups):
    """
    Rename repeated plot names inside each group.

    Every occurrence of a repeated name is renamed, the first included:
    three "A" plots become "A - 1", "A - 2" and "A - 3".

    Returns a (report, total_duplicates) tuple. The report maps each group
    key to a list of {"name", "count", "corrected"} entries and leaves out
    groups without duplicates. total_duplicates counts repeated names per
    group, not renamed placemarks.
    """
    report = {}
    total_duplicates = 0

    for parent_key, plots in groups.items():
        plot_counts = {}
        for record in plots:
            plot_counts[record.plotname] = plot_counts.get(record.plotname, 0) + 1

        name_tracker = {}
        modified_names = {}
        for record in plots:
            if plot_counts[record.plotname] < 2:
                continue
            name_tracker[record.plotname] = name_tracker.get(record.plotname, 0) + 1
            new_name = f"{record.plotname} - {name_tracker[record.plotname]}"
            set_field_text(record.field, new_name)
            modified_names.setdefault(record.plotname, []).append(new_name)

        entries = []
        for plotname, count in plot_counts.items():
            if count > 1:
                entries.append({
                    'name': plotname,
                    'count': count,
                    'corrected': modified_names.get(plotname, []),
                })
                total_duplicates += 1

        if entries:
            report[parent_key] = entries

    return report, total_duplicates


def fix_duplicate_names(root, attributes):
    """Rename duplicate plot names in a parsed KML document, in place."""
    attributes = list(attributes)
    if not attributes:
        raise ValueError("At least one attribute name is required")

    groups = group_placemarks(root, attributes)
    return rename_duplicates(groups)


def print_report(report, total_duplicates):
    """Print the duplicates report and the summary line."""
    print("Duplicate plot names by parent attribute group:")
    print(format_report(report))
    print(f"Total plots with repeated names corrected: {total_duplicates}")


def process_and_fix_kml(file_path, output_dir=DEFAULT_OUTPUT_DIR, attributes=None,
                        recover=False, report_file=None, debug=False):
    """
    Fix duplicate plot names in a KML file and write the corrected copy.

    The corrected file is written to "<output_dir>/<name> - Corrigido.kml".
    Any failure is reported on the console and an empty report is returned;
    in that case no output file is written.
    """
    if attributes is None:
        attributes = DEFAULT_ATTRIBUTES

    try:
        root = parse_kml_file(file_path, recover=recover)
        report, total_duplicates = fix_duplicate_names(root, attributes)

        # Serialize and check targets before touching the output directory
        data = serialize_kml(root)
        if report_file:
            check_report_target(report_file)

        staged_file, output_file = stage_kml_file(data, output_dir, file_path)
        try:
            if report_file:
                save_report(report, report_file)
            commit_kml_file(staged_file, output_file)
        finally:
            discard_staged_file(staged_file)

        print(f"Created corrected KML file: {output_file}")
        if report_file:
            print(f"Saved duplicates report: {report_file}")

        print_report(report, total_duplicates)
        return report

    except Exception as e:
        print(f"Error: Failed to process KML file: {e}")
        if debug:
            traceback.print_exc()
        return {}


if __name__ == "__main__":
    print("This module provides functions for fixing duplicate plot names in KML files.")
