"""Serialising XML to text, either streamed call by call or by visiting a node tree."""

from __future__ import annotations

from typing import Any, Optional, TextIO

from .xmlnodes import (
    Scalar,
    XMLComment,
    XMLDeclaration,
    XMLElement,
    XMLText,
    XMLUnknown,
    XMLVisitor,
    format_value,
)

_ENTITIES = {'"': "&quot;", "&": "&amp;", "'": "&apos;", "<": "&lt;", ">": "&gt;"}
_FULL_TABLE = str.maketrans(_ENTITIES)
_RESTRICTED_TABLE = str.maketrans({ch: _ENTITIES[ch] for ch in "&<>"})

_BOM = "\ufeff"
_INDENT = "    "


def escape(text: str, restricted: bool = False) -> str:
    """Replace markup characters with entities.

    The full set covers quotes, apostrophes, ampersands and angle brackets;
    the restricted set, used for text content, leaves quotes alone.
    """
    return text.translate(_RESTRICTED_TABLE if restricted else _FULL_TABLE)


class XMLPrinter(XMLVisitor):
    """Writes XML either to ``stream`` or, when no stream is given, to memory.

    Elements are indented four spaces per level unless ``compact`` is set,
    in which case only the required characters are written.
    """

    def __init__(
        self, stream: Optional[TextIO] = None, compact: bool = False, depth: int = 0
    ) -> None:
        self._stream = stream
        self._parts: list[str] = []
        self._compact_mode = compact
        self._depth = depth
        self._text_depth = -1
        self._first_element = True
        self._element_just_opened = False
        self._process_entities = True
        self._stack: list[str] = []

    def _print(self, text: str) -> None:
        if self._stream is not None:
            self._stream.write(text)
        else:
            self._parts.append(text)

    def _print_space(self, depth: int) -> None:
        self._print(_INDENT * depth)

    def _print_string(self, text: str, restricted: bool) -> None:
        self._print(escape(text, restricted) if self._process_entities else text)

    def _seal_element_if_just_opened(self) -> None:
        if self._element_just_opened:
            self._element_just_opened = False
            self._print(">")

    def _compact_for(self, element: XMLElement) -> bool:
        """Whether ``element`` is written compactly; override to vary per element."""
        return self._compact_mode

    def _push_leaf(self, text: str) -> None:
        self._seal_element_if_just_opened()
        if self._text_depth < 0 and not self._first_element and not self._compact_mode:
            self._print("\n")
            self._print_space(self._depth)
        self._first_element = False
        self._print(text)

    def push_header(self, write_bom: bool, write_declaration: bool) -> None:
        """Write the byte order mark and/or the standard XML declaration."""
        if write_bom:
            self._print(_BOM)
        if write_declaration:
            self.push_declaration('xml version="1.0"')

    def open_element(self, name: str, compact: bool = False) -> None:
        """Start an element; close it with :meth:`close_element`."""
        self._seal_element_if_just_opened()
        self._stack.append(name)
        if self._text_depth < 0 and not self._first_element and not compact:
            self._print("\n")
        if not compact:
            self._print_space(self._depth)
        self._print(f"<{name}")
        self._element_just_opened = True
        self._first_element = False
        self._depth += 1

    def push_attribute(self, name: str, value: Scalar) -> None:
        """Add an attribute to the element that was just opened."""
        self._print(f' {name}="')
        self._print_string(format_value(value), False)
        self._print('"')

    def close_element(self, compact: bool = False) -> None:
        """Close the innermost open element."""
        if not self._stack:
            raise ValueError("no open element to close")
        self._depth -= 1
        name = self._stack.pop()
        if self._element_just_opened:
            self._print("/>")
        else:
            if self._text_depth < 0 and not compact:
                self._print("\n")
                self._print_space(self._depth)
            self._print(f"</{name}>")
        if self._text_depth == self._depth:
            self._text_depth = -1
        if self._depth == 0 and not compact:
            self._print("\n")
        self._element_just_opened = False

    def push_text(self, value: Scalar, cdata: bool = False) -> None:
        """Add text; non-string values are formatted and never written as CDATA."""
        if not isinstance(value, str):
            value = format_value(value)
            cdata = False
        self._text_depth = self._depth - 1
        self._seal_element_if_just_opened()
        if cdata:
            self._print(f"<![CDATA[{value}]]>")
        else:
            self._print_string(value, True)

    def push_comment(self, comment: str) -> None:
        self._push_leaf(f"<!--{comment}-->")

    def push_declaration(self, value: str) -> None:
        self._push_leaf(f"<?{value}?>")

    def push_unknown(self, value: str) -> None:
        self._push_leaf(f"<!{value}>")

    def visit_enter_document(self, doc: Any) -> bool:
        self._process_entities = getattr(doc, "process_entities", True)
        if getattr(doc, "write_bom", False):
            self.push_header(True, False)
        return True

    def visit_enter_element(self, element: XMLElement) -> bool:
        parent = element.parent
        if isinstance(parent, XMLElement):
            compact = self._compact_for(parent)
        else:
            compact = self._compact_mode
        self.open_element(element.name, compact)
        for attr in element.attributes():
            self.push_attribute(attr.name, attr.value)
        return True

    def visit_exit_element(self, element: XMLElement) -> bool:
        self.close_element(self._compact_for(element))
        return True

    def visit_text(self, text: XMLText) -> bool:
        self.push_text(text.value, text.cdata)
        return True

    def visit_comment(self, comment: XMLComment) -> bool:
        self.push_comment(comment.value)
        return True

    def visit_declaration(self, declaration: XMLDeclaration) -> bool:
        self.push_declaration(declaration.value)
        return True

    def visit_unknown(self, unknown: XMLUnknown) -> bool:
        self.push_unknown(unknown.value)
        return True

    def getvalue(self) -> str:
        """The text printed to memory so far; empty when writing to a stream."""
        return "".join(self._parts)

    def clear(self) -> None:
        """Discard the text printed to memory."""
        self._parts.clear()