"""Tree-sitter Parser - JSX/TSX source model with format-preserving printing.

Tree-sitter gives us:
- Millisecond parses of TSX, TypeScript, JSX and JavaScript
- Exact byte spans for every node, so edits can be spliced into the text
- Runs 100% locally (no Node toolchain needed)

The parsed file is exposed as an arena: ``SourceTree.elements`` holds one
``JSXOpeningNode`` per opening or self-closing markup tag, addressed by its
index. Mutation is an explicit ``insert_attribute`` call that records a text
splice; ``print_source`` applies the splices to the original text, so an
untouched tree prints back byte-identically.
"""

import json
import logging
from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language as TSLanguage
from tree_sitter import Node, Parser

from ..errors import SourceSyntaxError

logger = logging.getLogger(__name__)


class Language(Enum):
    """Source languages that can carry JSX markup."""
    TSX = "tsx"
    TYPESCRIPT = "typescript"
    JSX = "jsx"
    JAVASCRIPT = "javascript"


# File extension to language mapping
EXTENSION_MAP = {
    ".tsx": Language.TSX,
    ".ts": Language.TYPESCRIPT,
    ".mts": Language.TYPESCRIPT,
    ".cts": Language.TYPESCRIPT,
    ".jsx": Language.JSX,
    ".js": Language.JAVASCRIPT,
    ".mjs": Language.JAVASCRIPT,
    ".cjs": Language.JAVASCRIPT,
}

ELEMENT_NODE_TYPES = frozenset({"jsx_opening_element", "jsx_self_closing_element"})

# Calls whose result is still a component, e.g. memo(() => ...)
COMPONENT_WRAPPERS = frozenset({"memo", "forwardRef", "lazy"})

_parsers: dict[Language, Parser] = {}


def detect_language(file_path: Optional[str]) -> Language:
    """Detect language from file extension (TSX when unknown)."""
    if not file_path:
        return Language.TSX
    return EXTENSION_MAP.get(Path(file_path).suffix.lower(), Language.TSX)


def _get_parser(language: Language) -> Parser:
    """Get or create a parser for the given language."""
    parser = _parsers.get(language)
    if parser is not None:
        return parser

    if language == Language.TSX:
        grammar = TSLanguage(tree_sitter_typescript.language_tsx())
    elif language == Language.TYPESCRIPT:
        grammar = TSLanguage(tree_sitter_typescript.language_typescript())
    else:
        # The JavaScript grammar includes JSX
        grammar = TSLanguage(tree_sitter_javascript.language())

    parser = Parser(grammar)
    _parsers[language] = parser
    logger.debug("Loaded tree-sitter grammar for %s", language.value)
    return parser


class _OffsetMap:
    """Converts tree-sitter byte offsets into character offsets and positions."""

    def __init__(self, text: str):
        self._ascii = text.isascii()
        self._byte_starts: list[int] = []
        if not self._ascii:
            offset = 0
            for ch in text:
                self._byte_starts.append(offset)
                offset += len(ch.encode("utf-8"))
            self._byte_starts.append(offset)

        self.line_starts = [0]
        for i, ch in enumerate(text):
            if ch == "\n":
                self.line_starts.append(i + 1)

    def char_offset(self, byte_offset: int) -> int:
        if self._ascii:
            return byte_offset
        return bisect_left(self._byte_starts, byte_offset)

    def position(self, char_offset: int) -> tuple[int, int]:
        """1-based line and 0-based column of a character offset."""
        line = bisect_right(self.line_starts, char_offset)
        return line, char_offset - self.line_starts[line - 1]


@dataclass
class JSXAttributeNode:
    """One entry of a JSX attribute list."""
    name: str | None  # None for spread attributes
    value: str | None  # string literal value, if any
    start: int
    end: int
    line: int
    is_spread: bool = False


@dataclass
class JSXOpeningNode:
    """An opening or self-closing JSX tag, addressed by arena index."""
    index: int
    tag_name: str
    line: int
    column: int
    start: int
    end: int
    name_end: int
    attributes: list[JSXAttributeNode] = field(default_factory=list)
    self_closing: bool = False
    component: str | None = None
    inserted: list[str] = field(default_factory=list)

    def has_attribute(self, name: str) -> bool:
        """Check for an attribute, including ones inserted into this tree."""
        return name in self.inserted or any(a.name == name for a in self.attributes)

    def attribute_value(self, name: str) -> str | None:
        for attr in self.attributes:
            if attr.name == name:
                return attr.value
        return None

    @property
    def literal_attributes(self) -> dict[str, str]:
        """String-literal attributes as a name -> value mapping."""
        return {
            a.name: a.value
            for a in self.attributes
            if a.name is not None and a.value is not None
        }

    @property
    def last_spread_index(self) -> int | None:
        spreads = [i for i, a in enumerate(self.attributes) if a.is_spread]
        return spreads[-1] if spreads else None


@dataclass
class ComponentNode:
    """A component declaration found while walking the tree."""
    name: str
    kind: str  # "function" | "arrow" | "class"
    start_line: int
    end_line: int


@dataclass
class SourceTree:
    """Parsed source file: original text, element arena and pending insertions."""
    text: str
    file_path: str | None
    language: Language
    elements: list[JSXOpeningNode] = field(default_factory=list)
    components: list[ComponentNode] = field(default_factory=list)
    _insertions: list[tuple[int, int, str]] = field(default_factory=list, repr=False)

    @property
    def is_modified(self) -> bool:
        return bool(self._insertions)

    def find_element(
        self,
        line: int,
        column: int | None,
        tag_name: str | None = None,
    ) -> JSXOpeningNode | None:
        """Find the element whose opening tag starts at (line, column).

        A None column matches any element on the line. ``tag_name`` is
        compared case-insensitively; ``*`` or None accepts any tag.
        """
        for element in self.elements:
            if element.line != line:
                continue
            if column is not None and element.column != column:
                continue
            if tag_name and tag_name != "*" and element.tag_name.lower() != tag_name.lower():
                continue
            return element
        return None

    def existing_attribute_values(self, name: str) -> set[str]:
        """Collect every string-literal value of attribute ``name`` in the file."""
        values = set()
        for element in self.elements:
            value = element.attribute_value(name)
            if value is not None:
                values.add(value)
        return values

    def insert_attribute(self, index: int, name: str, value: str, position: int) -> None:
        """Insert ``name="value"`` into element ``index`` at attribute-list ``position``.

        Layout follows the neighbouring attribute: when it sits on its own
        line, the new attribute goes on a new line with the same
        indentation; otherwise it is separated by a single space.
        """
        element = self.elements[index]
        attrs = element.attributes
        if not 0 <= position <= len(attrs):
            raise IndexError(f"attribute position {position} out of range for <{element.tag_name}>")

        rendered = _render_attribute(name, value)

        if position > 0:
            anchor = attrs[position - 1]
            offset = anchor.end
            previous_end = attrs[position - 2].end if position > 1 else element.name_end
        else:
            offset = element.name_end
            anchor = attrs[0] if attrs else None
            previous_end = element.name_end

        gap = self.text[previous_end:anchor.start] if anchor is not None else ""
        if "\n" in gap:
            newline = "\r\n" if "\r\n" in gap else "\n"
            text = newline + self._indentation(anchor.start) + rendered
        else:
            text = " " + rendered

        self._insertions.append((offset, len(self._insertions), text))
        element.inserted.append(name)

    def _indentation(self, offset: int) -> str:
        line_start = self.text.rfind("\n", 0, offset) + 1
        end = line_start
        while end < len(self.text) and self.text[end] in " \t":
            end += 1
        return self.text[line_start:end]


def _render_attribute(name: str, value: str) -> str:
    if '"' in value:
        return f"{name}={{{json.dumps(value)}}}"
    return f'{name}="{value}"'


def _node_text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text is not None else ""


def _first_syntax_error(root: Node) -> Node | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def _component_declaration(node: Node) -> tuple[str, str] | None:
    """Return (name, kind) when ``node`` declares a component."""
    if node.type in ("function_declaration", "class_declaration"):
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None
        name = _node_text(name_node)
        if not name[:1].isupper():
            return None
        return name, "class" if node.type == "class_declaration" else "function"

    if node.type == "variable_declarator":
        name_node = node.child_by_field_name("name")
        value = node.child_by_field_name("value")
        if name_node is None or value is None or name_node.type != "identifier":
            return None
        name = _node_text(name_node)
        if not name[:1].isupper():
            return None
        if value.type == "arrow_function":
            return name, "arrow"
        if value.type in ("function_expression", "function"):
            return name, "function"
        if value.type == "call_expression" and _is_wrapped_component(value):
            return name, "function"
    return None


def _is_wrapped_component(call: Node) -> bool:
    callee = call.child_by_field_name("function")
    if callee is None:
        return False
    if callee.type == "identifier":
        return _node_text(callee) in COMPONENT_WRAPPERS
    if callee.type == "member_expression":
        prop = callee.child_by_field_name("property")
        return prop is not None and _node_text(prop) in COMPONENT_WRAPPERS
    return False


def _walk(root: Node) -> Iterator[tuple[Node, str | None, tuple[str, str] | None]]:
    """Yield (node, enclosing component, own declaration) in document order."""
    stack: list[tuple[Node, str | None]] = [(root, None)]
    while stack:
        node, component = stack.pop()
        declared = _component_declaration(node)
        yield node, component, declared
        if declared is not None:
            component = declared[0]
        for child in reversed(node.children):
            stack.append((child, component))


def _build_attribute(node: Node, offsets: _OffsetMap) -> JSXAttributeNode | None:
    start = offsets.char_offset(node.start_byte)
    end = offsets.char_offset(node.end_byte)
    line = node.start_point[0] + 1

    if node.type == "jsx_expression":
        if any(child.type == "spread_element" for child in node.named_children):
            return JSXAttributeNode(None, None, start, end, line, is_spread=True)
        return None

    if node.type != "jsx_attribute":
        return None

    named = node.named_children
    if not named:
        return None
    name = _node_text(named[0])
    value = None
    if len(named) > 1 and named[-1].type == "string":
        value = _node_text(named[-1])[1:-1]
    return JSXAttributeNode(name, value, start, end, line)


def _build_element(
    node: Node,
    component: str | None,
    index: int,
    offsets: _OffsetMap,
) -> JSXOpeningNode | None:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        # Fragment: <>...</>
        return None

    start = offsets.char_offset(node.start_byte)
    line, column = offsets.position(start)

    attributes = []
    for attr_node in node.children_by_field_name("attribute"):
        attr = _build_attribute(attr_node, offsets)
        if attr is not None:
            attributes.append(attr)

    return JSXOpeningNode(
        index=index,
        tag_name="".join(_node_text(name_node).split()),
        line=line,
        column=column,
        start=start,
        end=offsets.char_offset(node.end_byte),
        name_end=offsets.char_offset(name_node.end_byte),
        attributes=attributes,
        self_closing=node.type == "jsx_self_closing_element",
        component=component,
    )


def parse_source(text: str, file_path: str | None = None) -> SourceTree:
    """Parse JSX-bearing source into a SourceTree.

    Args:
        text: Source code
        file_path: Used to pick the grammar and to label errors

    Returns:
        SourceTree with the element arena and component declarations

    Raises:
        SourceSyntaxError: if the text does not parse cleanly
    """
    language = detect_language(file_path)
    data = text.encode("utf-8")
    tree = _get_parser(language).parse(data)
    offsets = _OffsetMap(text)

    if tree.root_node.has_error:
        bad = _first_syntax_error(tree.root_node) or tree.root_node
        line, column = offsets.position(offsets.char_offset(bad.start_byte))
        if bad.is_missing:
            detail = f"missing {bad.type}"
        else:
            snippet = _node_text(bad)[:20].splitlines()
            detail = f"unexpected {snippet[0]!r}" if snippet else "unexpected token"
        raise SourceSyntaxError(file_path, line, column, detail)

    source = SourceTree(text=text, file_path=file_path, language=language)

    for node, component, declared in _walk(tree.root_node):
        if declared is not None:
            source.components.append(ComponentNode(
                name=declared[0],
                kind=declared[1],
                start_line=node.start_point[0] + 1,
                end_line=node.end_point[0] + 1,
            ))
        if node.type in ELEMENT_NODE_TYPES:
            element = _build_element(node, component, len(source.elements), offsets)
            if element is not None:
                source.elements.append(element)

    return source


def print_source(tree: SourceTree) -> str:
    """Print a SourceTree back to text with its recorded insertions applied."""
    if not tree.is_modified:
        return tree.text

    text = tree.text
    for offset, _seq, insertion in sorted(tree._insertions, reverse=True):
        text = text[:offset] + insertion + text[offset:]
    return text
