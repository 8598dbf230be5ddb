"""Tests for KML parsing and SimpleData lookups."""

import pytest
from lxml import etree

from KML_Deduplicator.kml_parser import (parse_kml_file, parse_kml_content, find_placemarks,
                                         index_simple_data, field_text, set_field_text,
                                         diagnose_kml, KMLParseError)

from kml_samples import kml_document, placemark, plot


def test_find_placemarks_in_document_order():
    root = parse_kml_content(kml_document(plot("F", "Z", "1"), plot("F", "Z", "2")))
    placemarks = find_placemarks(root)
    assert len(placemarks) == 2
    assert field_text(index_simple_data(placemarks[1])["TALHAO"]) == "2"


def test_find_placemarks_without_namespace():
    content = '<kml><Document><Folder><Placemark/><Placemark/></Folder></Document></kml>'
    assert len(find_placemarks(parse_kml_content(content))) == 2


def test_index_keeps_first_field_with_a_name():
    content = kml_document(placemark([("TALHAO", "first"), ("TALHAO", "second")]))
    fields = index_simple_data(find_placemarks(parse_kml_content(content))[0])
    assert list(fields) == ["TALHAO"]
    assert field_text(fields["TALHAO"]) == "first"


def test_field_text_strips_whitespace_and_handles_missing():
    element = etree.fromstring('<SimpleData name="ZONA">  Norte \n</SimpleData>')
    assert field_text(element) == "Norte"
    assert field_text(None) is None
    assert field_text(etree.fromstring('<SimpleData name="ZONA"/>')) == ""


def test_set_field_text_replaces_nested_content():
    element = etree.fromstring('<SimpleData name="TALHAO">A<b>x</b>tail</SimpleData>')
    set_field_text(element, "A - 1")
    assert etree.tostring(element) == b'<SimpleData name="TALHAO">A - 1</SimpleData>'


def test_parse_kml_file_reads_non_ascii(write_kml):
    path = write_kml(kml_document(plot("Fazenda São João", "Zona 1", "Talhão 7")))
    root = parse_kml_file(str(path))
    fields = index_simple_data(find_placemarks(root)[0])
    assert field_text(fields["NOME_FAZ"]) == "Fazenda São João"


def test_parse_kml_file_rejects_malformed(write_kml):
    path = write_kml('<kml><Document><Placemark></Document></kml>')
    with pytest.raises(KMLParseError) as excinfo:
        parse_kml_file(str(path))
    assert excinfo.value.source == str(path)


def test_parse_kml_file_recovers_when_asked(write_kml):
    path = write_kml('<kml><Document><Placemark><name>x</name></Document></kml>')
    root = parse_kml_file(str(path), recover=True)
    assert len(find_placemarks(root)) == 1


def test_parse_kml_file_missing_file(tmp_path):
    with pytest.raises(KMLParseError):
        parse_kml_file(str(tmp_path / "missing.kml"))


def test_diagnose_kml(write_kml, capsys):
    path = write_kml(kml_document(plot("F", "Z", "1")))
    assert diagnose_kml(str(path)) is True
    out = capsys.readouterr().out
    assert "Found 1 placemarks" in out
    assert "Field names: NOME_FAZ, TALHAO, ZONA" in out


def test_diagnose_kml_reports_syntax_error(write_kml, capsys):
    path = write_kml('<kml><Document>')
    assert diagnose_kml(str(path)) is False
    assert "XML Syntax Error" in capsys.readouterr().out


def test_parse_kml_content_text_with_declared_encoding():
    content = ('<?xml version="1.0" encoding="ISO-8859-1"?>\n'
               + kml_document(plot("Fazenda São João", "Z", "Talhão")).split("\n", 1)[1])
    fields = index_simple_data(find_placemarks(parse_kml_content(content))[0])
    assert field_text(fields["NOME_FAZ"]) == "Fazenda São João"
    assert field_text(fields["TALHAO"]) == "Talhão"


def test_parse_kml_content_bytes_with_declared_encoding():
    content = '<?xml version="1.0" encoding="ISO-8859-1"?><kml><name>Talhão</name></kml>'
    root = parse_kml_content(content.encode("iso-8859-1"))
    assert root.findtext("name") == "Talhão"
