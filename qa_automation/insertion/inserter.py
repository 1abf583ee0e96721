"""Insertion Executor - applies planned test identifiers to source text."""

from typing import Optional, Sequence

import structlog

from ..indexer.tree_sitter_parser import parse_source, print_source
from .models import InsertionResult, SkipReason, SkipRecord, TestIdInsertion

logger = structlog.get_logger()


def insert_test_ids(
    code: str,
    insertions: Sequence[TestIdInsertion],
    file_path: Optional[str] = None,
    attribute: str = "data-testid",
) -> InsertionResult:
    """Insert identifier attributes into JSX opening tags.

    Edits are applied in descending (line, column) order against a single
    parse of ``code``. Each edit fails on its own: a missing element or a
    taken identifier is recorded as a skip and the rest still apply.

    The attribute goes right after the last spread attribute so that
    caller-supplied props cannot override it, else at the end of the list.

    Args:
        code: Source text
        insertions: Planned edits for this file
        file_path: Used for grammar selection and error messages
        attribute: Name of the identifier attribute

    Returns:
        InsertionResult with the printed code, inserted count and skips

    Raises:
        SourceSyntaxError: if ``code`` cannot be parsed
    """
    tree = parse_source(code, file_path)
    existing_ids = tree.existing_attribute_values(attribute)
    inserted = 0
    skipped: list[SkipRecord] = []

    ordered = sorted(
        insertions,
        key=lambda i: (i.line, i.column if i.column is not None else -1),
        reverse=True,
    )

    for insertion in ordered:
        element = tree.find_element(insertion.line, insertion.column, insertion.element_tag_name)

        if element is not None and element.has_attribute(attribute):
            skipped.append(SkipRecord(
                reason=SkipReason.PRE_EXISTING,
                message=f"<{element.tag_name}> at line {element.line} already has {attribute}",
                test_id=insertion.test_id,
                file_path=file_path,
            ))
            continue

        if insertion.test_id in existing_ids:
            skipped.append(SkipRecord(
                reason=SkipReason.DUPLICATE_IDENTIFIER,
                message=f'Test ID "{insertion.test_id}" already exists in file',
                test_id=insertion.test_id,
                file_path=file_path,
            ))
            continue

        if element is None:
            column = insertion.column if insertion.column is not None else "*"
            skipped.append(SkipRecord(
                reason=SkipReason.ELEMENT_NOT_FOUND,
                message=f"Could not find JSX element at line {insertion.line}:{column}",
                test_id=insertion.test_id,
                file_path=file_path,
            ))
            continue

        spread = element.last_spread_index
        position = spread + 1 if spread is not None else len(element.attributes)
        tree.insert_attribute(element.index, attribute, insertion.test_id, position)
        existing_ids.add(insertion.test_id)
        inserted += 1

    logger.debug(
        "Applied insertions",
        file_path=file_path,
        inserted=inserted,
        skipped=len(skipped),
    )
    return InsertionResult(code=print_source(tree), inserted=inserted, skipped=skipped)
