"""React analyzer - component and element index over a parsed source file.

One walk of the source model yields:
- declared components (function, arrow and class forms, including
  ``memo``/``forwardRef``/``lazy`` wrapped declarations)
- every markup element occurrence with its position, existing test
  identifier and nearest enclosing component
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from .tree_sitter_parser import SourceTree, parse_source


class ComponentKind(str, Enum):
    """Declaration forms recognised as React components."""
    FUNCTION = "function"
    ARROW = "arrow"
    CLASS = "class"


@dataclass
class ComponentInfo:
    """A declared component and its line span."""
    name: str
    kind: ComponentKind
    start_line: int
    end_line: int


@dataclass
class JSXElementInfo:
    """One markup element occurrence."""
    tag_name: str
    line: int
    column: int
    has_test_id: bool = False
    existing_test_id: Optional[str] = None
    parent_component: Optional[str] = None
    attributes: dict[str, str] = field(default_factory=dict)
    index: int = -1  # arena index in the SourceTree this was built from


@dataclass
class AnalysisResult:
    """Components and element occurrences of one file."""
    components: list[ComponentInfo]
    jsx_elements: list[JSXElementInfo]
    tree: SourceTree

    def find_component(self, name: str) -> Optional[ComponentInfo]:
        for component in self.components:
            if component.name == name:
                return component
        return None

    @property
    def existing_test_ids(self) -> set[str]:
        return {el.existing_test_id for el in self.jsx_elements if el.existing_test_id}


def analyze_tree(tree: SourceTree, testid_attribute: str = "data-testid") -> AnalysisResult:
    """Build the component/element index for an already parsed tree."""
    components = [
        ComponentInfo(
            name=node.name,
            kind=ComponentKind(node.kind),
            start_line=node.start_line,
            end_line=node.end_line,
        )
        for node in tree.components
    ]

    elements = []
    for node in tree.elements:
        elements.append(JSXElementInfo(
            tag_name=node.tag_name,
            line=node.line,
            column=node.column,
            has_test_id=node.has_attribute(testid_attribute),
            existing_test_id=node.attribute_value(testid_attribute),
            parent_component=node.component,
            attributes=node.literal_attributes,
            index=node.index,
        ))

    return AnalysisResult(components=components, jsx_elements=elements, tree=tree)


def analyze_react_file(
    code: str,
    file_path: Optional[str] = None,
    testid_attribute: str = "data-testid",
) -> AnalysisResult:
    """Parse and index a React source file.

    Raises:
        SourceSyntaxError: if the file cannot be parsed
    """
    return analyze_tree(parse_source(code, file_path), testid_attribute)


def find_element_at_position(
    elements: Sequence[JSXElementInfo],
    line: int,
    column: Optional[int] = None,
) -> Optional[JSXElementInfo]:
    """Resolve a recorded (line, column) to one element occurrence.

    Captured coordinates can drift by a column or two, so resolution falls
    back from an exact match to the only element on the line, then to the
    element on the nearest line (first one wins on ties). A None column
    skips the exact step.
    """
    if not elements:
        return None

    if column is not None:
        for element in elements:
            if element.line == line and element.column == column:
                return element

    same_line = [el for el in elements if el.line == line]
    if len(same_line) == 1:
        return same_line[0]

    closest = elements[0]
    closest_distance = abs(closest.line - line)
    for element in elements[1:]:
        distance = abs(element.line - line)
        if distance < closest_distance:
            closest, closest_distance = element, distance
    return closest
