"""Indexer - JSX source model and React component/element index.

This module provides:
- Tree-sitter parsing of TSX/JSX into an element arena
- Format-preserving attribute insertion and printing
- Component and element occurrence indexing
- Position resolution for recorded source anchors
"""

from .react_analyzer import (
    AnalysisResult,
    ComponentInfo,
    ComponentKind,
    JSXElementInfo,
    analyze_react_file,
    analyze_tree,
    find_element_at_position,
)
from .tree_sitter_parser import (
    JSXAttributeNode,
    JSXOpeningNode,
    Language,
    SourceTree,
    parse_source,
    print_source,
)

__all__ = [
    # Source model
    "Language",
    "SourceTree",
    "JSXOpeningNode",
    "JSXAttributeNode",
    "parse_source",
    "print_source",
    # Index
    "ComponentKind",
    "ComponentInfo",
    "JSXElementInfo",
    "AnalysisResult",
    "analyze_react_file",
    "analyze_tree",
    "find_element_at_position",
]
