import html
import io
import xml.etree.ElementTree as ET
from types import SimpleNamespace

import pytest

from softraster.xmlnodes import XMLComment, XMLElement, XMLNode, format_value
from softraster.xmlprinter import XMLPrinter, escape


@pytest.mark.parametrize(
    "text", ["plain", "a & b", "<tag>", "say \"hi\" and 'bye'", "&amp; already"]
)
def test_escape_round_trips(text):
    assert html.unescape(escape(text)) == text
    assert html.unescape(escape(text, True)) == text


def test_escape_full_removes_markup_characters():
    escaped = escape("<a href=\"x\" title='y'>&</a>")
    for ch in "<>\"'":
        assert ch not in escaped


def test_escape_restricted_keeps_quotes():
    assert escape('say "hi"', True) == 'say "hi"'
    assert escape("x < y", True) == "x &lt; y"


def test_empty_element():
    printer = XMLPrinter()
    printer.open_element("foo")
    printer.close_element()
    assert printer.getvalue() == "<foo/>\n"


def test_attributes_parse_back():
    printer = XMLPrinter()
    printer.open_element("item")
    printer.push_attribute("name", "a \"quoted\" & <odd> value")
    printer.push_attribute("count", 7)
    printer.push_attribute("flag", True)
    printer.push_attribute("ratio", 0.25)
    printer.close_element()
    root = ET.fromstring(printer.getvalue())
    assert root.tag == "item"
    assert root.attrib == {
        "name": "a \"quoted\" & <odd> value",
        "count": format_value(7),
        "flag": format_value(True),
        "ratio": format_value(0.25),
    }


def test_nested_elements_are_indented():
    printer = XMLPrinter()
    printer.open_element("a")
    printer.open_element("b")
    printer.open_element("c")
    printer.close_element()
    printer.close_element()
    printer.close_element()
    out = printer.getvalue()
    root = ET.fromstring(out)
    assert [child.tag for child in root] == ["b"]
    assert [child.tag for child in root[0]] == ["c"]
    lines = out.splitlines()
    assert lines[1].startswith(" " * 4 + "<b")
    assert lines[2].startswith(" " * 8 + "<c")


def test_compact_mode_has_no_newlines():
    printer = XMLPrinter(compact=True)
    printer.open_element("a", True)
    printer.open_element("b", True)
    printer.close_element(True)
    printer.close_element(True)
    out = printer.getvalue()
    assert "\n" not in out
    assert " " not in out
    assert [child.tag for child in ET.fromstring(out)] == ["b"]


def test_text_is_escaped_and_inline():
    printer = XMLPrinter()
    printer.open_element("a")
    printer.push_text("x < y & z")
    printer.open_element("b")
    printer.close_element()
    printer.close_element()
    out = printer.getvalue()
    assert "\n" not in out.rstrip("\n")
    root = ET.fromstring(out)
    assert root.text == "x < y & z"
    assert root[0].tag == "b"


def test_cdata_text():
    printer = XMLPrinter()
    printer.open_element("a")
    printer.push_text("1 < 2", cdata=True)
    printer.close_element()
    out = printer.getvalue()
    assert "<![CDATA[1 < 2]]>" in out
    assert ET.fromstring(out).text == "1 < 2"


def test_non_string_text_is_formatted():
    printer = XMLPrinter()
    printer.open_element("n")
    printer.push_text(42, cdata=True)
    printer.close_element()
    out = printer.getvalue()
    assert "CDATA" not in out
    assert ET.fromstring(out).text == format_value(42)


def test_comment_and_declaration():
    printer = XMLPrinter()
    printer.push_header(False, True)
    printer.open_element("a")
    printer.push_comment("note")
    printer.close_element()
    out = printer.getvalue()
    assert out.startswith('<?xml version="1.0"?>')
    assert "<!--note-->" in out
    assert ET.fromstring(out).tag == "a"


def test_bom_header():
    printer = XMLPrinter()
    printer.push_header(True, False)
    assert printer.getvalue() == "\ufeff"


def test_unknown_is_written_verbatim():
    printer = XMLPrinter()
    printer.push_unknown("DOCTYPE html")
    assert printer.getvalue() == "<!DOCTYPE html>"


def test_close_without_open_raises():
    with pytest.raises(ValueError):
        XMLPrinter().close_element()


def _stream_calls(printer):
    printer.open_element("a")
    printer.push_attribute("k", "v&")
    printer.open_element("b")
    printer.push_text("hi<")
    printer.close_element()
    printer.push_comment("note")
    printer.close_element()


def test_stream_output_matches_memory_output():
    memory = XMLPrinter()
    _stream_calls(memory)
    stream = io.StringIO()
    streamed = XMLPrinter(stream)
    _stream_calls(streamed)
    assert stream.getvalue() == memory.getvalue()
    assert streamed.getvalue() == ""


def test_visiting_tree_matches_streaming():
    root = XMLNode()
    a = XMLElement("a")
    root.insert_end_child(a)
    a.set_attribute("k", "v&")
    b = XMLElement("b")
    a.insert_end_child(b)
    b.set_text("hi<")
    a.insert_end_child(XMLComment("note"))

    visited = XMLPrinter()
    root.accept(visited)
    streamed = XMLPrinter()
    _stream_calls(streamed)
    assert visited.getvalue() == streamed.getvalue()
    parsed = ET.fromstring(visited.getvalue())
    assert parsed.attrib == {"k": "v&"}
    assert parsed.find("b").text == "hi<"


def test_document_without_entity_processing_writes_raw_text():
    printer = XMLPrinter()
    printer.visit_enter_document(SimpleNamespace(process_entities=False, write_bom=False))
    printer.open_element("a")
    printer.push_text("a<b")
    printer.close_element()
    assert "a<b" in printer.getvalue()


def test_document_with_bom_writes_bom_first():
    printer = XMLPrinter()
    printer.visit_enter_document(SimpleNamespace(process_entities=True, write_bom=True))
    printer.open_element("a")
    printer.close_element()
    out = printer.getvalue()
    assert out.startswith("\ufeff")
    assert ET.fromstring(out[1:]).tag == "a"


def test_initial_depth_indents_output():
    base = XMLPrinter()
    base.open_element("a")
    base.close_element()
    deeper = XMLPrinter(depth=1)
    deeper.open_element("a")
    deeper.close_element()
    assert deeper.getvalue() == " " * 4 + base.getvalue().rstrip("\n")


def test_clear_discards_output():
    printer = XMLPrinter()
    printer.open_element("a")
    printer.close_element()
    printer.clear()
    assert printer.getvalue() == ""
    printer.push_comment("again")
    assert printer.getvalue() == "<!--again-->"