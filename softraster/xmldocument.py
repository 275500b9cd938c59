"""XML documents: parsing text into a node tree, writing it back, and safe navigation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Callable, Optional, Union

from .xmlnodes import (
    XMLComment,
    XMLDeclaration,
    XMLElement,
    XMLError,
    XMLNode,
    XMLText,
    XMLUnknown,
    XMLVisitor,
)
from .xmlprinter import XMLPrinter

DEFAULT_DECLARATION = 'xml version="1.0" encoding="UTF-8"'

_BOM = "\ufeff"
_WS = " \t\n\v\f\r"
_WS_RUN = re.compile(r"[ \t\n\v\f\r]+")
_NEWLINES = re.compile(r"\r\n?|\n\r?")
_ENTITY = re.compile(r"&(?:#x([0-9a-fA-F]+)|#([0-9]+)|(quot|amp|apos|lt|gt));")
_NAMED = {"quot": '"', "amp": "&", "apos": "'", "lt": "<", "gt": ">"}


class Whitespace(IntEnum):
    """How whitespace inside text nodes is treated while parsing."""

    PRESERVE = 0
    COLLAPSE = 1


class XMLParseError(ValueError):
    """A document could not be read; ``code`` says why."""

    def __init__(self, code: XMLError, message: str) -> None:
        super().__init__(message)
        self.code = code


def _is_name_start(ch: str) -> bool:
    return ord(ch) >= 128 or "a" <= ch <= "z" or "A" <= ch <= "Z" or ch in ":_"


def _is_name_char(ch: str) -> bool:
    return _is_name_start(ch) or "0" <= ch <= "9" or ch in ".-"


def _replace_entity(match: re.Match) -> str:
    hex_digits, dec_digits, name = match.groups()
    if name is not None:
        return _NAMED[name]
    code = int(hex_digits, 16) if hex_digits is not None else int(dec_digits)
    if 0 < code <= 0x10FFFF and not 0xD800 <= code <= 0xDFFF:
        return chr(code)
    return match.group(0)


def _decode(raw: str, *, entities: bool, collapse: bool = False) -> str:
    text = _NEWLINES.sub("\n", raw)
    if entities:
        text = _ENTITY.sub(_replace_entity, text)
    if collapse:
        text = _WS_RUN.sub(" ", text).strip(_WS)
    return text


class _Parser:
    """Recursive-descent reader that fills a document with nodes."""

    def __init__(self, doc: "XMLDocument", text: str) -> None:
        self.doc = doc
        self.text = text
        self.pos = 0

    def fail(self, code: XMLError, message: str) -> XMLParseError:
        return XMLParseError(code, f"{message} (at offset {self.pos})")

    def skip_ws(self) -> None:
        text, n = self.text, len(self.text)
        while self.pos < n and text[self.pos] in _WS:
            self.pos += 1

    def run(self) -> None:
        self.skip_ws()
        if self.text.startswith(_BOM, self.pos):
            self.doc.write_bom = True
            self.pos += 1
        if self.pos >= len(self.text):
            raise self.fail(XMLError.ERROR_EMPTY_DOCUMENT, "document is empty")
        closing = self.parse_children(self.doc)
        if closing is not None:
            raise self.fail(
                XMLError.ERROR_MISMATCHED_ELEMENT, f"unexpected closing tag </{closing}>"
            )

    def parse_children(self, parent: XMLNode) -> Optional[str]:
        """Parse nodes into ``parent``; return the name of a closing tag, if one ends them."""
        text = self.text
        while True:
            start = self.pos
            self.skip_ws()
            if self.pos >= len(text):
                return None
            if text.startswith("<?", self.pos):
                node: XMLNode = self.parse_delimited(
                    2, "?>", XMLError.ERROR_PARSING_DECLARATION, XMLDeclaration
                )
            elif text.startswith("<!--", self.pos):
                node = self.parse_delimited(
                    4, "-->", XMLError.ERROR_PARSING_COMMENT, XMLComment
                )
            elif text.startswith("<![CDATA[", self.pos):
                node = self.parse_cdata()
            elif text.startswith("<!", self.pos):
                node = self.parse_delimited(
                    2, ">", XMLError.ERROR_PARSING_UNKNOWN, XMLUnknown
                )
            elif text.startswith("<", self.pos):
                closing = self.parse_element(parent)
                if closing is not None:
                    return closing
                continue
            else:
                self.pos = start
                node = self.parse_text()
            parent.insert_end_child(node)

    def parse_delimited(
        self, skip: int, end: str, code: XMLError, kind: Callable[..., XMLNode]
    ) -> XMLNode:
        body = self.pos + skip
        stop = self.text.find(end, body)
        if stop < 0:
            raise self.fail(code, f"missing {end!r}")
        self.pos = stop + len(end)
        value = _decode(self.text[body:stop], entities=False)
        return kind(value, document=self.doc)

    def parse_cdata(self) -> XMLText:
        body = self.pos + len("<![CDATA[")
        stop = self.text.find("]]>", body)
        if stop < 0:
            raise self.fail(XMLError.ERROR_PARSING_CDATA, "unterminated CDATA section")
        self.pos = stop + 3
        value = _decode(self.text[body:stop], entities=False)
        return XMLText(value, document=self.doc, cdata=True)

    def parse_text(self) -> XMLText:
        stop = self.text.find("<", self.pos)
        if stop < 0:
            raise self.fail(XMLError.ERROR_PARSING_TEXT, "text is not followed by a tag")
        raw = self.text[self.pos:stop]
        self.pos = stop
        value = _decode(
            raw,
            entities=self.doc.process_entities,
            collapse=self.doc.whitespace is Whitespace.COLLAPSE,
        )
        return XMLText(value, document=self.doc)

    def parse_name(self) -> str:
        text, start = self.text, self.pos
        if start >= len(text) or not _is_name_start(text[start]):
            return ""
        end = start + 1
        while end < len(text) and _is_name_char(text[end]):
            end += 1
        self.pos = end
        return text[start:end]

    def parse_element(self, parent: XMLNode) -> Optional[str]:
        """Parse a tag; return the name if it was a closing tag."""
        self.pos += 1
        closing = self.text.startswith("/", self.pos)
        if closing:
            self.pos += 1
        name = self.parse_name()
        if not name:
            raise self.fail(XMLError.ERROR_PARSING_ELEMENT, "missing element name")
        if closing:
            self.skip_ws()
            if not self.text.startswith(">", self.pos):
                raise self.fail(
                    XMLError.ERROR_PARSING_ELEMENT, f"malformed closing tag </{name}"
                )
            self.pos += 1
            return name

        element = self.doc.new_element(name)
        parent.insert_end_child(element)
        while True:
            self.skip_ws()
            if self.pos >= len(self.text):
                raise self.fail(XMLError.ERROR_PARSING_ELEMENT, f"unterminated tag <{name}")
            ch = self.text[self.pos]
            if _is_name_start(ch):
                self.parse_attribute(element)
            elif self.text.startswith("/>", self.pos):
                self.pos += 2
                return None
            elif ch == ">":
                self.pos += 1
                break
            else:
                raise self.fail(
                    XMLError.ERROR_PARSING_ELEMENT, f"unexpected {ch!r} in tag <{name}"
                )

        end = self.parse_children(element)
        if end is None:
            raise self.fail(XMLError.ERROR_PARSING_ELEMENT, f"element <{name}> is not closed")
        if end != name:
            raise self.fail(
                XMLError.ERROR_MISMATCHED_ELEMENT, f"<{name}> closed by </{end}>"
            )
        return None

    def parse_attribute(self, element: XMLElement) -> None:
        name = self.parse_name()
        self.skip_ws()
        if not self.text.startswith("=", self.pos):
            raise self.fail(XMLError.ERROR_PARSING_ATTRIBUTE, f"attribute {name!r} has no value")
        self.pos += 1
        self.skip_ws()
        quote = self.text[self.pos:self.pos + 1]
        if quote not in ("'", '"'):
            raise self.fail(XMLError.ERROR_PARSING_ATTRIBUTE, f"attribute {name!r} is not quoted")
        stop = self.text.find(quote, self.pos + 1)
        if stop < 0:
            raise self.fail(
                XMLError.ERROR_PARSING_ATTRIBUTE, f"attribute {name!r} is not terminated"
            )
        raw = self.text[self.pos + 1:stop]
        self.pos = stop + 1
        if element.find_attribute(name) is not None:
            raise self.fail(XMLError.ERROR_PARSING_ATTRIBUTE, f"duplicate attribute {name!r}")
        element.set_attribute(name, _decode(raw, entities=self.doc.process_entities))


class XMLDocument(XMLNode):
    """The root of a node tree; it creates nodes and reads and writes XML text."""

    def __init__(
        self, process_entities: bool = True, whitespace: Whitespace = Whitespace.PRESERVE
    ) -> None:
        super().__init__("")
        self.document = self
        self.process_entities = process_entities
        self.whitespace = Whitespace(whitespace)
        self.write_bom = False
        self.error_id = XMLError.SUCCESS

    def _failed(self, error: XMLParseError) -> XMLParseError:
        self.delete_children()
        self.error_id = error.code
        return error

    def parse(self, text: Union[str, bytes]) -> "XMLDocument":
        """Replace the content with the document in ``text``."""
        self.clear()
        self.write_bom = False
        if isinstance(text, bytes):
            try:
                text = text.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise self._failed(
                    XMLParseError(XMLError.ERROR_PARSING, "document is not UTF-8")
                ) from exc
        try:
            _Parser(self, text).run()
        except XMLParseError as exc:
            raise self._failed(exc)
        return self

    def load_file(self, path: Union[str, Path]) -> "XMLDocument":
        """Replace the content with the document stored at ``path``."""
        self.clear()
        try:
            data = Path(path).read_bytes()
        except FileNotFoundError as exc:
            raise self._failed(
                XMLParseError(XMLError.ERROR_FILE_NOT_FOUND, f"file not found: {path}")
            ) from exc
        except OSError as exc:
            raise self._failed(
                XMLParseError(
                    XMLError.ERROR_FILE_COULD_NOT_BE_OPENED, f"cannot open {path}: {exc}"
                )
            ) from exc
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise self._failed(
                XMLParseError(XMLError.ERROR_FILE_READ_ERROR, f"{path} is not UTF-8")
            ) from exc
        return self.parse(text)

    def save_file(self, path: Union[str, Path], compact: bool = False) -> None:
        """Write the document to ``path`` as UTF-8."""
        with open(path, "w", encoding="utf-8", newline="") as stream:
            self.accept(XMLPrinter(stream, compact))

    def root_element(self) -> Optional[XMLElement]:
        return self.first_child_element()

    def to_string(self, compact: bool = False) -> str:
        """The document as XML text."""
        printer = XMLPrinter(compact=compact)
        self.accept(printer)
        return printer.getvalue()

    def new_element(self, name: str) -> XMLElement:
        return XMLElement(name, document=self)

    def new_comment(self, text: str) -> XMLComment:
        return XMLComment(text, document=self)

    def new_text(self, text: str) -> XMLText:
        return XMLText(text, document=self)

    def new_declaration(self, text: Optional[str] = None) -> XMLDeclaration:
        """A declaration; without ``text``, the standard XML 1.0 UTF-8 one."""
        return XMLDeclaration(DEFAULT_DECLARATION if text is None else text, document=self)

    def new_unknown(self, text: str) -> XMLUnknown:
        return XMLUnknown(text, document=self)

    def delete_node(self, node: XMLNode) -> None:
        """Unlink ``node`` from wherever it sits in this document."""
        if node.document is not self:
            raise ValueError("node belongs to a different document")
        if node.parent is not None:
            node.parent.delete_child(node)

    def clear(self) -> None:
        """Remove every node and reset the error state."""
        self.delete_children()
        self.error_id = XMLError.SUCCESS

    def shallow_clone(self) -> None:  # type: ignore[override]
        return None

    def shallow_equal(self, other: XMLNode) -> bool:
        return False

    def accept(self, visitor: XMLVisitor) -> bool:
        if visitor.visit_enter_document(self):
            for child in self:
                if not child.accept(visitor):
                    break
        return visitor.visit_exit_document(self)


@dataclass(frozen=True)
class XMLHandle:
    """Wraps a node that may be ``None`` so navigation can be chained safely."""

    node: Optional[XMLNode] = None

    def _step(self, move: Callable[[XMLNode], Optional[XMLNode]]) -> "XMLHandle":
        return XMLHandle(move(self.node) if self.node is not None else None)

    def first_child(self) -> "XMLHandle":
        return self._step(lambda n: n.first_child())

    def first_child_element(self, name: Optional[str] = None) -> "XMLHandle":
        return self._step(lambda n: n.first_child_element(name))

    def last_child(self) -> "XMLHandle":
        return self._step(lambda n: n.last_child())

    def last_child_element(self, name: Optional[str] = None) -> "XMLHandle":
        return self._step(lambda n: n.last_child_element(name))

    def previous_sibling(self) -> "XMLHandle":
        return self._step(lambda n: n.previous_sibling())

    def previous_sibling_element(self, name: Optional[str] = None) -> "XMLHandle":
        return self._step(lambda n: n.previous_sibling_element(name))

    def next_sibling(self) -> "XMLHandle":
        return self._step(lambda n: n.next_sibling())

    def next_sibling_element(self, name: Optional[str] = None) -> "XMLHandle":
        return self._step(lambda n: n.next_sibling_element(name))

    def to_node(self) -> Optional[XMLNode]:
        return self.node

    def to_element(self) -> Optional[XMLElement]:
        return self.node if isinstance(self.node, XMLElement) else None

    def to_text(self) -> Optional[XMLText]:
        return self.node if isinstance(self.node, XMLText) else None

    def to_unknown(self) -> Optional[XMLUnknown]:
        return self.node if isinstance(self.node, XMLUnknown) else None

    def to_declaration(self) -> Optional[XMLDeclaration]:
        return self.node if isinstance(self.node, XMLDeclaration) else None