import sys
import os
import argparse

from .kml_parser import diagnose_kml
from .deduplicator import process_and_fix_kml, DEFAULT_ATTRIBUTES, DEFAULT_OUTPUT_DIR


def main(argv=None):
    """Main entry point for the script."""
    parser = argparse.ArgumentParser(description='Rename duplicate plot names in a KML file')
    parser.add_argument('input_file', help='KML file to correct')
    parser.add_argument('--output', dest='output_dir', default=DEFAULT_OUTPUT_DIR,
                        help=f'Directory to save the corrected file (default: {DEFAULT_OUTPUT_DIR})')
    # Pass more than one attribute to identify duplicates within parent groups
    parser.add_argument('--attributes', nargs='+', default=DEFAULT_ATTRIBUTES, metavar='NAME',
                        help='SimpleData fields forming the group key; the last one is the plot name '
                             f'(default: {" ".join(DEFAULT_ATTRIBUTES)})')
    parser.add_argument('--report', dest='report_file', default=None,
                        help='Also save the duplicates report as JSON to this file')
    parser.add_argument('--debug', action='store_true', help='Show detailed diagnostic information')
    parser.add_argument('--force', action='store_true', help='Attempt to parse malformed KML files')
    args = parser.parse_args(argv)

    # Check if the input file exists
    if not os.path.exists(args.input_file):
        print(f"Error: File '{args.input_file}' not found.")
        sys.exit(1)

    if not args.input_file.lower().endswith('.kml'):
        print("Warning: Input file does not have .kml extension.")

    print(f"Processing: {args.input_file}")
    print(f"Output directory: {args.output_dir}")
    print(f"Attributes: {', '.join(args.attributes)}")

    # Run diagnostics if requested
    if args.debug:
        diagnose_kml(args.input_file)

    process_and_fix_kml(args.input_file, args.output_dir, args.attributes,
                        recover=args.force, report_file=args.report_file, debug=args.debug)


if __name__ == "__main__":
    main()
