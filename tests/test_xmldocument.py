import pytest

from softraster.xmldocument import (
    DEFAULT_DECLARATION,
    Whitespace,
    XMLDocument,
    XMLHandle,
    XMLParseError,
)
from softraster.xmlnodes import (
    XMLComment,
    XMLDeclaration,
    XMLElement,
    XMLError,
    XMLText,
    XMLUnknown,
    XMLVisitor,
)


def parsed(text, **kwargs):
    return XMLDocument(**kwargs).parse(text)


def test_parse_elements_and_attributes():
    doc = parsed('<root a="1" b=\'two\'><child/><child id="x"/></root>')
    root = doc.root_element()
    assert root.name == "root"
    assert root.attribute("a") == "1"
    assert root.attribute("b") == "two"
    assert [attr.name for attr in root.attributes()] == ["a", "b"]
    children = root.children()
    assert len(children) == 2
    assert children[1].attribute("id") == "x"


def test_whitespace_between_elements_is_dropped():
    doc = parsed("<a>\n   <b/>\n   <c/>\n</a>\n")
    assert [child.name for child in doc.root_element().children()] == ["b", "c"]


def test_entities_are_decoded():
    doc = parsed('<a t="&lt;&amp;&#65;&#x42;">x&gt;y</a>')
    root = doc.root_element()
    assert root.attribute("t") == "<&AB"
    assert root.get_text() == "x>y"


def test_unknown_entity_is_kept():
    doc = parsed("<a>&foo; &#xZZ;</a>")
    assert doc.root_element().get_text() == "&foo; &#xZZ;"


def test_entities_left_alone_when_disabled():
    doc = parsed("<a>&lt;b&gt;</a>", process_entities=False)
    assert doc.root_element().get_text() == "&lt;b&gt;"


def test_newlines_are_normalized():
    doc = parsed("<a>x\r\ny\rz</a>")
    assert doc.root_element().get_text() == "x\ny\nz"


def test_preserve_keeps_text_whitespace():
    doc = parsed("<a>  hi there  </a>")
    assert doc.root_element().get_text() == "  hi there  "


def test_collapse_whitespace():
    doc = parsed("<a>  hello \n\t world  </a>", whitespace=Whitespace.COLLAPSE)
    assert doc.root_element().get_text() == "hello world"


def test_special_node_kinds():
    doc = parsed('<?xml version="1.0"?><!DOCTYPE a><!-- note --><a><![CDATA[<raw>]]></a>')
    declaration, unknown, comment, root = doc.children()
    assert isinstance(declaration, XMLDeclaration)
    assert declaration.value == 'xml version="1.0"'
    assert isinstance(unknown, XMLUnknown)
    assert unknown.value == "DOCTYPE a"
    assert isinstance(comment, XMLComment)
    assert comment.value == " note "
    text = root.first_child()
    assert isinstance(text, XMLText)
    assert text.cdata is True
    assert text.value == "<raw>"


def test_bom_is_recorded_and_written():
    doc = parsed("\ufeff<a/>")
    assert doc.write_bom is True
    assert doc.to_string().startswith("\ufeff")
    assert parsed("<a/>").write_bom is False


def test_parse_bytes():
    doc = parsed('<a v="é"/>'.encode("utf-8"))
    assert doc.root_element().attribute("v") == "é"


def test_compact_round_trip():
    source = '<a><b x="1"/><c>text</c></a>'
    assert parsed(source).to_string(compact=True) == source


def test_pretty_output_round_trips():
    doc = parsed('<a><b x="1"/><c>t</c><!--c--></a>')
    text = doc.to_string()
    assert parsed(text).to_string() == text
    assert parsed(text).to_string(compact=True) == doc.to_string(compact=True)


def test_escaped_values_round_trip():
    doc = XMLDocument()
    element = doc.new_element("e")
    element.set_attribute("q", "<\"'&>")
    element.set_text("a < b & c")
    doc.insert_end_child(element)
    again = parsed(doc.to_string())
    assert again.root_element().attribute("q") == "<\"'&>"
    assert again.root_element().get_text() == "a < b & c"


@pytest.mark.parametrize(
    "source, code",
    [
        ("", XMLError.ERROR_EMPTY_DOCUMENT),
        ("   \n ", XMLError.ERROR_EMPTY_DOCUMENT),
        ("<a></b>", XMLError.ERROR_MISMATCHED_ELEMENT),
        ("</a>", XMLError.ERROR_MISMATCHED_ELEMENT),
        ("<a>", XMLError.ERROR_PARSING_ELEMENT),
        ("<a", XMLError.ERROR_PARSING_ELEMENT),
        ("<1/>", XMLError.ERROR_PARSING_ELEMENT),
        ('<a x="1" x="2"/>', XMLError.ERROR_PARSING_ATTRIBUTE),
        ("<a x=1/>", XMLError.ERROR_PARSING_ATTRIBUTE),
        ('<a x="1/>', XMLError.ERROR_PARSING_ATTRIBUTE),
        ("<a x/>", XMLError.ERROR_PARSING_ATTRIBUTE),
        ("<!-- open", XMLError.ERROR_PARSING_COMMENT),
        ("<?xml", XMLError.ERROR_PARSING_DECLARATION),
        ("<!DOCTYPE", XMLError.ERROR_PARSING_UNKNOWN),
        ("<a><![CDATA[x</a>", XMLError.ERROR_PARSING_CDATA),
        ("<a/>tail", XMLError.ERROR_PARSING_TEXT),
    ],
)
def test_parse_errors(source, code):
    doc = XMLDocument()
    with pytest.raises(XMLParseError) as info:
        doc.parse(source)
    assert info.value.code == code
    assert doc.error_id == code


def test_failed_parse_leaves_document_empty():
    doc = parsed("<ok/>")
    with pytest.raises(XMLParseError):
        doc.parse("<a><b></a>")
    assert doc.children() == ()
    assert doc.root_element() is None


def test_successful_parse_resets_error():
    doc = XMLDocument()
    with pytest.raises(XMLParseError):
        doc.parse("<a>")
    doc.parse("<a/>")
    assert doc.error_id == XMLError.SUCCESS
    assert doc.root_element().name == "a"


def test_save_and_load_file(tmp_path):
    doc = parsed('<a k="v"><b>text</b></a>')
    path = tmp_path / "doc.xml"
    doc.save_file(path)
    loaded = XMLDocument().load_file(path)
    assert loaded.to_string() == doc.to_string()
    assert path.read_text(encoding="utf-8") == doc.to_string()


def test_save_compact(tmp_path):
    doc = parsed("<a><b/></a>")
    path = tmp_path / "c.xml"
    doc.save_file(path, compact=True)
    assert path.read_text(encoding="utf-8") == "<a><b/></a>"


def test_load_missing_file(tmp_path):
    doc = XMLDocument()
    with pytest.raises(XMLParseError) as info:
        doc.load_file(tmp_path / "missing.xml")
    assert info.value.code == XMLError.ERROR_FILE_NOT_FOUND


def test_load_non_utf8_file(tmp_path):
    path = tmp_path / "bad.xml"
    path.write_bytes(b"<a>\xff\xfe</a>")
    with pytest.raises(XMLParseError) as info:
        XMLDocument().load_file(path)
    assert info.value.code == XMLError.ERROR_FILE_READ_ERROR


def test_new_nodes_belong_to_document():
    doc = XMLDocument()
    nodes = [
        doc.new_element("e"),
        doc.new_comment("c"),
        doc.new_text("t"),
        doc.new_declaration(),
        doc.new_unknown("u"),
    ]
    assert all(node.document is doc for node in nodes)
    assert all(node.parent is None for node in nodes)
    assert nodes[3].value == DEFAULT_DECLARATION
    assert doc.new_declaration("custom").value == "custom"


def test_node_from_other_document_is_rejected():
    doc, other = XMLDocument(), XMLDocument()
    with pytest.raises(ValueError):
        doc.insert_end_child(other.new_element("x"))
    with pytest.raises(ValueError):
        doc.delete_node(other.new_element("x"))


def test_delete_node_and_clear():
    doc = parsed("<a><b/><c/></a>")
    root = doc.root_element()
    b = root.first_child_element("b")
    doc.delete_node(b)
    assert [child.name for child in root.children()] == ["c"]
    assert b.parent is None
    doc.clear()
    assert doc.children() == ()


def test_document_shallow_operations():
    doc = XMLDocument()
    assert doc.shallow_clone() is None
    assert doc.shallow_equal(XMLDocument()) is False


class _Recorder(XMLVisitor):
    def __init__(self, stop_after=None):
        self.events = []
        self.stop_after = stop_after

    def visit_enter_document(self, doc):
        self.events.append("doc>")
        return True

    def visit_exit_document(self, doc):
        self.events.append("<doc")
        return True

    def visit_enter_element(self, element):
        self.events.append(element.name + ">")
        return True

    def visit_exit_element(self, element):
        self.events.append("<" + element.name)
        return element.name != self.stop_after

    def visit_text(self, text):
        self.events.append("text:" + text.value)
        return True


def test_accept_walks_in_order():
    recorder = _Recorder()
    parsed("<a><b>t</b></a><c/>").accept(recorder)
    assert recorder.events == ["doc>", "a>", "b>", "text:t", "<b", "<a", "c>", "<c", "<doc"]


def test_accept_stops_when_visitor_returns_false():
    recorder = _Recorder(stop_after="a")
    parsed("<a/><b/>").accept(recorder)
    assert "b>" not in recorder.events
    assert recorder.events[-1] == "<doc"


def test_handle_navigation():
    doc = parsed("<r><x/><y>t</y><x id='2'/></r>")
    handle = XMLHandle(doc)
    second = handle.first_child_element("r").last_child_element("x")
    assert second.to_element().attribute("id") == "2"
    y = second.previous_sibling_element()
    assert y.to_element().name == "y"
    assert y.first_child().to_text().value == "t"
    assert y.first_child().to_element() is None
    assert handle.first_child_element("r").first_child().next_sibling().to_node() is y.to_node()
    assert y.next_sibling().to_element() is second.to_element()
    assert y.previous_sibling().to_element().name == "x"


def test_handle_missing_nodes_are_safe():
    doc = parsed("<r/>")
    missing = XMLHandle(doc).first_child_element("nope").first_child().next_sibling_element()
    assert missing.to_node() is None
    assert missing.to_element() is None
    assert missing.to_text() is None
    assert missing.to_unknown() is None
    assert missing.to_declaration() is None
    assert XMLHandle(None).last_child().previous_sibling().to_node() is None


def test_handle_typed_casts():
    doc = parsed("<?xml version='1.0'?><!DOCTYPE r><r/>")
    handle = XMLHandle(doc)
    assert isinstance(handle.first_child().to_declaration(), XMLDeclaration)
    assert isinstance(handle.first_child().next_sibling().to_unknown(), XMLUnknown)
    assert isinstance(handle.last_child().to_element(), XMLElement)
    assert handle.first_child().to_element() is None