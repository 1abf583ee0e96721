"""Insertion Planner - turns anchored interactions into per-file edit plans."""

from dataclasses import replace
from typing import Iterable, Sequence

import structlog

from ..config import NamingStrategy
from ..indexer.react_analyzer import AnalysisResult, find_element_at_position
from ..recording.models import Interaction, InteractionType
from .models import InsertionPlan, SkipReason, SkipRecord, TestIdInsertion
from .naming import generate_test_id, make_unique

logger = structlog.get_logger()


class InsertionPlanner:
    """Plans test identifier insertions for one file at a time.

    Usage:
        planner = InsertionPlanner(NamingStrategy.COMPONENT_ACTION)
        analysis = analyze_react_file(code, "src/LoginPage.tsx")
        plan = planner.plan("src/LoginPage.tsx", analysis, interactions)
    """

    def __init__(
        self,
        strategy: NamingStrategy | str = NamingStrategy.COMPONENT_ACTION,
        testid_attribute: str = "data-testid",
    ):
        self.strategy = NamingStrategy(strategy)
        self.testid_attribute = testid_attribute
        self.log = logger.bind(component="insertion_planner")

    def plan(
        self,
        file_path: str,
        analysis: AnalysisResult,
        interactions: Sequence[Interaction],
    ) -> InsertionPlan:
        """Plan insertions for the interactions anchored in one file.

        Interactions are processed in order. Existing identifiers are reused
        instead of planned; new identifiers are made unique against the
        file's identifiers and those assigned earlier in this run.

        Args:
            file_path: Path the edits should target
            analysis: Component/element index of the file
            interactions: Interactions anchored in this file

        Returns:
            InsertionPlan with edits, skips and selector -> identifier mappings
        """
        plan = InsertionPlan()
        used = set(analysis.existing_test_ids)
        planned_positions: dict[tuple[int, int], str] = {}

        for interaction in interactions:
            if interaction.type == InteractionType.NAVIGATION:
                continue

            selector = interaction.selector
            anchor = interaction.anchor
            if anchor is None or anchor.line_number <= 0:
                plan.skipped.append(SkipRecord(
                    reason=SkipReason.NO_ANCHOR,
                    message=f"No source line for {interaction.type.value} on {selector or interaction.element.tag_name}",
                    selector=selector,
                    file_path=file_path,
                ))
                continue

            occurrence = find_element_at_position(
                analysis.jsx_elements, anchor.line_number, anchor.column_number
            )
            if occurrence is None:
                plan.skipped.append(SkipRecord(
                    reason=SkipReason.UNRESOLVED_POSITION,
                    message=f"No JSX element near {file_path}:{anchor.line_number}",
                    selector=selector,
                    file_path=file_path,
                ))
                continue

            if occurrence.existing_test_id:
                if selector:
                    plan.test_id_map.setdefault(selector, occurrence.existing_test_id)
                continue

            if occurrence.has_test_id:
                plan.skipped.append(SkipRecord(
                    reason=SkipReason.PRE_EXISTING,
                    message=(
                        f"<{occurrence.tag_name}> at line {occurrence.line} has a "
                        f"non-literal {self.testid_attribute}"
                    ),
                    selector=selector,
                    file_path=file_path,
                ))
                continue

            position = (occurrence.line, occurrence.column)
            if position in planned_positions:
                first_id = planned_positions[position]
                if selector:
                    plan.test_id_map.setdefault(selector, first_id)
                plan.skipped.append(SkipRecord(
                    reason=SkipReason.DUPLICATE_POSITION,
                    message=f"Element at {occurrence.line}:{occurrence.column} already planned as {first_id}",
                    selector=selector,
                    test_id=first_id,
                    file_path=file_path,
                ))
                continue

            source = anchor
            if not source.component_name and occurrence.parent_component:
                source = replace(source, component_name=occurrence.parent_component)

            test_id = make_unique(
                generate_test_id(self.strategy, interaction.element, source),
                used,
            )
            used.add(test_id)
            planned_positions[position] = test_id

            plan.insertions.append(TestIdInsertion(
                file_path=file_path,
                line=occurrence.line,
                column=occurrence.column,
                test_id=test_id,
                element_tag_name=occurrence.tag_name,
                component_name=source.component_name,
            ))
            if selector:
                plan.test_id_map.setdefault(selector, test_id)

        self.log.info(
            "Planned insertions",
            file_path=file_path,
            insertions=len(plan.insertions),
            skipped=len(plan.skipped),
        )
        return plan

    @staticmethod
    def skip_unanchored(interactions: Iterable[Interaction]) -> list[SkipRecord]:
        """Skip records for targeted interactions that carry no source anchor."""
        return [
            SkipRecord(
                reason=SkipReason.NO_ANCHOR,
                message=f"No source anchor for {i.type.value} on {i.selector or i.element.tag_name}",
                selector=i.selector or None,
            )
            for i in interactions
            if (i.anchor is None or not i.anchor.file_path) and i.type != InteractionType.NAVIGATION
        ]
