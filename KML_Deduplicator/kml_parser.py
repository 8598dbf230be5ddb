import os
import re
from lxml import etree

# Define default namespaces
NAMESPACES = {
    'kml': 'http://www.opengis.net/kml/2.2',
    'gx': 'http://www.google.com/kml/ext/2.2',
    'atom': 'http://www.w3.org/2005/Atom',
    'xal': 'urn:oasis:names:tc:ciq:xsdschema:xAL:2.0'
}

XML_DECLARATION = re.compile(r'^\s*<\?xml[^>]*\?>')

# Match on local name so files without the KML default namespace still work
PLACEMARK_XPATH = '//*[local-name()="Placemark"]'
SIMPLE_DATA_XPATH = './/*[local-name()="SimpleData"]'


class KMLParseError(Exception):
    """Raised when a KML file cannot be read or parsed."""

    def __init__(self, source, message):
        super().__init__(f"Failed to parse KML file '{source}': {message}")
        self.source = source


def _make_parser(recover=False):
    return etree.XMLParser(recover=recover, resolve_entities=False)


def parse_kml_file(file_path, recover=False):
    """Parse a KML file and return its root element."""
    try:
        with open(file_path, 'rb') as f:
            content = f.read()
    except OSError as e:
        raise KMLParseError(file_path, e.strerror or str(e)) from e

    return parse_kml_content(content, recover=recover, source=file_path)


def parse_kml_content(content, recover=False, source='<string>'):
    """Parse KML text or bytes and return its root element."""
    if isinstance(content, str):
        # Text is already decoded; a declared encoding no longer applies
        content = XML_DECLARATION.sub('', content, count=1)
        content = content.encode('utf-8')

    try:
        root = etree.fromstring(content, _make_parser(recover))
    except etree.XMLSyntaxError as e:
        raise KMLParseError(source, str(e)) from e

    # The recovering parser returns None when nothing could be salvaged
    if root is None:
        raise KMLParseError(source, "no XML content could be recovered")

    return root


def find_placemarks(root):
    """Return all Placemark elements in document order."""
    return root.xpath(PLACEMARK_XPATH)


def index_simple_data(placemark):
    """Map each SimpleData name to the first element in the placemark carrying it."""
    fields = {}
    for element in placemark.xpath(SIMPLE_DATA_XPATH):
        name = element.get('name')
        if name is not None and name not in fields:
            fields[name] = element
    return fields


def field_text(element):
    """Full text content of a data field, stripped. None if there is no field."""
    if element is None:
        return None
    return ''.join(element.itertext()).strip()


def set_field_text(element, value):
    """Replace the whole text content of a data field."""
    # Children take their tail text with them
    for child in list(element):
        element.remove(child)
    element.text = value


def diagnose_kml(file_path):
    """Diagnostic function for KML files."""
    print(f"Diagnosing KML file: {file_path}")
    try:
        print(f"File size: {os.path.getsize(file_path):,} bytes")

        # Check for basic XML syntax
        try:
            tree = etree.parse(file_path, _make_parser())
        except etree.XMLSyntaxError as e:
            print(f"XML Syntax Error: {e}")
            return False

        # Check for required KML elements
        root = tree.getroot()
        if etree.QName(root).localname != 'kml':
            print("Error: Not a valid KML file (missing kml root element)")
            return False

        if root.find('.//kml:Document', namespaces=NAMESPACES) is None and \
           root.find('.//kml:Folder', namespaces=NAMESPACES) is None and \
           root.find('.//Document') is None and root.find('.//Folder') is None:
            print("Warning: No Document or Folder elements found")

        placemarks = find_placemarks(root)
        if not placemarks:
            print("Warning: No Placemarks found in the file")
        else:
            print(f"Found {len(placemarks)} placemarks")

        simple_data = root.xpath('//*[local-name()="SimpleData"]')
        names = sorted({el.get('name') for el in simple_data if el.get('name')})
        print(f"Found {len(simple_data)} SimpleData fields")
        if names:
            print(f"Field names: {', '.join(names)}")

        print("Diagnosis complete")
        return True

    except Exception as e:
        print(f"Error during diagnosis: {e}")
        return False


if __name__ == "__main__":
    print("This module provides functions for parsing KML files.")
