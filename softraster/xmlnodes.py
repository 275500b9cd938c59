"""An in-memory XML node tree: elements, attributes, text, comments and the like."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Iterator, Optional, TypeVar, Union

T = TypeVar("T")

Scalar = Union[str, bool, int, float]


class XMLError(IntEnum):
    """Error codes for XML reading and value conversion."""

    SUCCESS = 0
    NO_ATTRIBUTE = 1
    WRONG_ATTRIBUTE_TYPE = 2
    ERROR_FILE_NOT_FOUND = 3
    ERROR_FILE_COULD_NOT_BE_OPENED = 4
    ERROR_FILE_READ_ERROR = 5
    ERROR_ELEMENT_MISMATCH = 6
    ERROR_PARSING_ELEMENT = 7
    ERROR_PARSING_ATTRIBUTE = 8
    ERROR_IDENTIFYING_TAG = 9
    ERROR_PARSING_TEXT = 10
    ERROR_PARSING_CDATA = 11
    ERROR_PARSING_COMMENT = 12
    ERROR_PARSING_DECLARATION = 13
    ERROR_PARSING_UNKNOWN = 14
    ERROR_EMPTY_DOCUMENT = 15
    ERROR_MISMATCHED_ELEMENT = 16
    ERROR_PARSING = 17
    CAN_NOT_CONVERT_TEXT = 18
    NO_TEXT_NODE = 19


class XMLAttributeError(ValueError):
    """A typed value could not be read from an attribute or an element's text."""

    def __init__(self, code: XMLError, message: str) -> None:
        super().__init__(message)
        self.code = code


class XMLVisitor:
    """Callbacks for a depth-first walk of a node tree.

    Returning ``False`` from a callback stops the walk of that node's
    children and of its later siblings. Every callback returns ``True``
    by default.
    """

    def visit_enter_document(self, doc: "XMLNode") -> bool:
        return True

    def visit_exit_document(self, doc: "XMLNode") -> bool:
        return True

    def visit_enter_element(self, element: "XMLElement") -> bool:
        return True

    def visit_exit_element(self, element: "XMLElement") -> bool:
        return True

    def visit_declaration(self, declaration: "XMLDeclaration") -> bool:
        return True

    def visit_text(self, text: "XMLText") -> bool:
        return True

    def visit_comment(self, comment: "XMLComment") -> bool:
        return True

    def visit_unknown(self, unknown: "XMLUnknown") -> bool:
        return True


_INT_RE = re.compile(r"\s*([+-]?\d+)", re.ASCII)
_FLOAT_RE = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.ASCII | re.IGNORECASE,
)


def to_int(text: str) -> int:
    """Read a leading decimal integer, ignoring leading whitespace and trailing text."""
    match = _INT_RE.match(text)
    if match is None:
        raise ValueError(f"not an integer: {text!r}")
    return int(match.group(1))


def to_unsigned(text: str) -> int:
    """Read a leading integer as a 32-bit unsigned value; negatives wrap around."""
    return to_int(text) % (1 << 32)


def to_bool(text: str) -> bool:
    """An integer (non-zero is true), or exactly ``true`` or ``false``."""
    try:
        return to_int(text) != 0
    except ValueError:
        pass
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError(f"not a boolean: {text!r}")


def to_float(text: str) -> float:
    """Read a leading floating-point number, ignoring trailing text."""
    match = _FLOAT_RE.match(text)
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    return float(match.group(1))


def format_value(value: Scalar) -> str:
    """The text form of a value as written into attributes and text nodes."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return "%.17g" % value
    raise TypeError(f"cannot format a value of type {type(value).__name__}")


class XMLNode:
    """A node in the tree; it may have a parent and an ordered list of children."""

    def __init__(self, value: str = "", document: Optional["XMLNode"] = None) -> None:
        self.value = value
        self.document = document
        self.parent: Optional[XMLNode] = None
        self._children: list[XMLNode] = []

    def __iter__(self) -> Iterator["XMLNode"]:
        return iter(tuple(self._children))

    def children(self) -> tuple["XMLNode", ...]:
        return tuple(self._children)

    def first_child(self) -> Optional["XMLNode"]:
        return self._children[0] if self._children else None

    def last_child(self) -> Optional["XMLNode"]:
        return self._children[-1] if self._children else None

    @staticmethod
    def _matches(node: "XMLNode", name: Optional[str]) -> bool:
        return isinstance(node, XMLElement) and (name is None or node.name == name)

    def first_child_element(self, name: Optional[str] = None) -> Optional["XMLElement"]:
        return next((n for n in self._children if self._matches(n, name)), None)

    def last_child_element(self, name: Optional[str] = None) -> Optional["XMLElement"]:
        return next((n for n in reversed(self._children) if self._matches(n, name)), None)

    def _position(self) -> int:
        assert self.parent is not None
        return self.parent._children.index(self)

    def previous_sibling(self) -> Optional["XMLNode"]:
        if self.parent is None:
            return None
        index = self._position()
        return self.parent._children[index - 1] if index > 0 else None

    def next_sibling(self) -> Optional["XMLNode"]:
        if self.parent is None:
            return None
        siblings = self.parent._children
        index = self._position()
        return siblings[index + 1] if index + 1 < len(siblings) else None

    def previous_sibling_element(self, name: Optional[str] = None) -> Optional["XMLElement"]:
        if self.parent is None:
            return None
        before = self.parent._children[: self._position()]
        return next((n for n in reversed(before) if self._matches(n, name)), None)

    def next_sibling_element(self, name: Optional[str] = None) -> Optional["XMLElement"]:
        if self.parent is None:
            return None
        after = self.parent._children[self._position() + 1:]
        return next((n for n in after if self._matches(n, name)), None)

    def _check_insert(self, node: "XMLNode") -> None:
        if node.document is not self.document:
            raise ValueError("node belongs to a different document")
        ancestor: Optional[XMLNode] = self
        while ancestor is not None:
            if ancestor is node:
                raise ValueError("a node cannot be inserted below itself")
            ancestor = ancestor.parent

    @staticmethod
    def _unlink(node: "XMLNode") -> None:
        if node.parent is not None:
            node.parent._children.remove(node)
            node.parent = None

    def insert_end_child(self, node: "XMLNode") -> "XMLNode":
        """Append ``node`` as the last child, moving it if it is already placed."""
        self._check_insert(node)
        self._unlink(node)
        self._children.append(node)
        node.parent = self
        return node

    def insert_first_child(self, node: "XMLNode") -> "XMLNode":
        """Insert ``node`` as the first child, moving it if it is already placed."""
        self._check_insert(node)
        self._unlink(node)
        self._children.insert(0, node)
        node.parent = self
        return node

    def insert_after_child(self, after: "XMLNode", node: "XMLNode") -> "XMLNode":
        """Insert ``node`` right after the child ``after``."""
        if after.parent is not self:
            raise ValueError("the reference node is not a child of this node")
        if after is node:
            return node
        self._check_insert(node)
        if after is self._children[-1]:
            return self.insert_end_child(node)
        self._unlink(node)
        self._children.insert(self._children.index(after) + 1, node)
        node.parent = self
        return node

    def delete_children(self) -> None:
        for child in self._children:
            child.parent = None
        self._children.clear()

    def delete_child(self, node: "XMLNode") -> None:
        if node.parent is not self:
            raise ValueError("node is not a child of this node")
        self._unlink(node)

    def shallow_clone(self) -> "XMLNode":
        """A copy of this node without its children or parent."""
        return type(self)(self.value, document=self.document)

    def shallow_equal(self, other: "XMLNode") -> bool:
        """Whether ``other`` is the same kind of node with the same value."""
        return type(other) is type(self) and other.value == self.value

    def accept(self, visitor: XMLVisitor) -> bool:
        """Walk the children with ``visitor``, stopping when it returns ``False``."""
        for child in self:
            if not child.accept(visitor):
                break
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class XMLText(XMLNode):
    """Character data; ``cdata`` marks text written as a CDATA section."""

    def __init__(
        self, value: str = "", document: Optional[XMLNode] = None, cdata: bool = False
    ) -> None:
        super().__init__(value, document)
        self.cdata = cdata

    def shallow_clone(self) -> "XMLText":
        return XMLText(self.value, document=self.document, cdata=self.cdata)

    def accept(self, visitor: XMLVisitor) -> bool:
        return visitor.visit_text(self)


class XMLComment(XMLNode):
    """A comment; the value is the comment text."""

    def accept(self, visitor: XMLVisitor) -> bool:
        return visitor.visit_comment(self)


class XMLDeclaration(XMLNode):
    """A declaration such as ``xml version="1.0"``, kept as uninterpreted text."""

    def accept(self, visitor: XMLVisitor) -> bool:
        return visitor.visit_declaration(self)


class XMLUnknown(XMLNode):
    """A tag that is not otherwise understood, such as a DTD, kept verbatim."""

    def accept(self, visitor: XMLVisitor) -> bool:
        return visitor.visit_unknown(self)


@dataclass
class XMLAttribute:
    """A name-value pair on an element."""

    name: str
    value: str = ""

    def _convert(self, convert: Callable[[str], T], kind: str) -> T:
        try:
            return convert(self.value)
        except ValueError:
            raise XMLAttributeError(
                XMLError.WRONG_ATTRIBUTE_TYPE,
                f"attribute {self.name!r} is not {kind}: {self.value!r}",
            ) from None

    def int_value(self) -> int:
        return self._convert(to_int, "an integer")

    def unsigned_value(self) -> int:
        return self._convert(to_unsigned, "an unsigned integer")

    def bool_value(self) -> bool:
        return self._convert(to_bool, "a boolean")

    def float_value(self) -> float:
        return self._convert(to_float, "a number")

    def set(self, value: Scalar) -> None:
        self.value = format_value(value)


class XMLElement(XMLNode):
    """An element: a name, ordered attributes and child nodes."""

    def __init__(self, name: str = "", document: Optional[XMLNode] = None) -> None:
        super().__init__(name, document)
        self._attributes: dict[str, XMLAttribute] = {}

    @property
    def name(self) -> str:
        return self.value

    @name.setter
    def name(self, name: str) -> None:
        self.value = name

    def attribute(self, name: str, value: Optional[str] = None) -> Optional[str]:
        """The attribute's value, or ``None``; with ``value``, only if it matches."""
        attr = self._attributes.get(name)
        if attr is None or (value is not None and attr.value != value):
            return None
        return attr.value

    def find_attribute(self, name: str) -> Optional[XMLAttribute]:
        return self._attributes.get(name)

    def attributes(self) -> tuple[XMLAttribute, ...]:
        """The attributes in document order."""
        return tuple(self._attributes.values())

    def _typed(self, name: str, default: T, convert: Callable[[XMLAttribute], T]) -> T:
        attr = self._attributes.get(name)
        return default if attr is None else convert(attr)

    def int_attribute(self, name: str, default: int = 0) -> int:
        return self._typed(name, default, XMLAttribute.int_value)

    def unsigned_attribute(self, name: str, default: int = 0) -> int:
        return self._typed(name, default, XMLAttribute.unsigned_value)

    def bool_attribute(self, name: str, default: bool = False) -> bool:
        return self._typed(name, default, XMLAttribute.bool_value)

    def float_attribute(self, name: str, default: float = 0.0) -> float:
        return self._typed(name, default, XMLAttribute.float_value)

    def set_attribute(self, name: str, value: Scalar) -> None:
        """Set an attribute, adding it at the end if it does not exist."""
        attr = self._attributes.get(name)
        if attr is None:
            attr = self._attributes[name] = XMLAttribute(name)
        attr.set(value)

    def delete_attribute(self, name: str) -> None:
        """Remove an attribute; a missing one is ignored."""
        self._attributes.pop(name, None)

    def get_text(self) -> Optional[str]:
        """The value of the first child if it is text, else ``None``."""
        first = self.first_child()
        return first.value if isinstance(first, XMLText) else None

    def set_text(self, value: Scalar) -> None:
        """Set the first child's text, adding a text node first if needed."""
        text = format_value(value)
        first = self.first_child()
        if isinstance(first, XMLText):
            first.value = text
        else:
            self.insert_first_child(XMLText(text, document=self.document))

    def _typed_text(self, convert: Callable[[str], T], kind: str) -> T:
        text = self.get_text()
        if text is None:
            raise XMLAttributeError(
                XMLError.NO_TEXT_NODE, f"element {self.name!r} has no text"
            )
        try:
            return convert(text)
        except ValueError:
            raise XMLAttributeError(
                XMLError.CAN_NOT_CONVERT_TEXT,
                f"text of element {self.name!r} is not {kind}: {text!r}",
            ) from None

    def int_text(self) -> int:
        return self._typed_text(to_int, "an integer")

    def unsigned_text(self) -> int:
        return self._typed_text(to_unsigned, "an unsigned integer")

    def bool_text(self) -> bool:
        return self._typed_text(to_bool, "a boolean")

    def float_text(self) -> float:
        return self._typed_text(to_float, "a number")

    def shallow_clone(self) -> "XMLElement":
        clone = XMLElement(self.name, document=self.document)
        for attr in self._attributes.values():
            clone.set_attribute(attr.name, attr.value)
        return clone

    def shallow_equal(self, other: XMLNode) -> bool:
        if not isinstance(other, XMLElement) or other.name != self.name:
            return False
        mine = [(a.name, a.value) for a in self.attributes()]
        theirs = [(a.name, a.value) for a in other.attributes()]
        return mine == theirs

    def accept(self, visitor: XMLVisitor) -> bool:
        if visitor.visit_enter_element(self):
            for child in self:
                if not child.accept(visitor):
                    break
        return visitor.visit_exit_element(self)