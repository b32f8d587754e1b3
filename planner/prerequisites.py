"""Prerequisite resolution over AND/OR logic sets of course dependencies."""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable

from .conf import is_passing_grade
from .errors import NotFoundError
from .models import Course, CourseDependency, TranscriptRecord


@dataclass
class PrerequisiteCheck:
    satisfied: bool
    missing: list[str] = field(default_factory=list)


def group_logic_sets(dependencies: Iterable[CourseDependency]) -> dict[int, list[tuple[int, str]]]:
    """Group dependency rows into ``{logic_set_id: [(course_id, code), ...]}``, lowest set first."""

    logic_sets: dict[int, list[tuple[int, str]]] = defaultdict(list)
    for dependency in dependencies:
        logic_sets[dependency.logic_set_id].append(
            (dependency.dependency_course_id, dependency.dependency_course.code)
        )
    return dict(sorted(logic_sets.items()))


def evaluate_logic_sets(logic_sets: dict[int, list[tuple[int, str]]], completed_ids) -> PrerequisiteCheck:
    """A course is satisfied when any one logic set is fully contained in ``completed_ids``.

    When no set is satisfied, the missing codes come from a single set: the
    lowest numbered set the student has already started, or the lowest
    numbered set when none is started.
    """

    if not logic_sets:
        return PrerequisiteCheck(satisfied=True)
    completed = set(completed_ids)
    for members in logic_sets.values():
        if all(course_id in completed for course_id, _ in members):
            return PrerequisiteCheck(satisfied=True)
    started = [
        members for members in logic_sets.values() if any(course_id in completed for course_id, _ in members)
    ]
    reported = started[0] if started else next(iter(logic_sets.values()))
    missing = [code for course_id, code in reported if course_id not in completed]
    return PrerequisiteCheck(satisfied=False, missing=missing)


def _prerequisite_rows(course_ids):
    # Standing and corequisite rows do not take part in the pass/fail decision.
    return (
        CourseDependency.objects.filter(
            course_id__in=list(course_ids),
            kind=CourseDependency.PREREQUISITE,
            dependency_course__isnull=False,
        )
        .select_related("dependency_course")
        .order_by("logic_set_id", "id")
    )


def resolve_prerequisites(course_id: int, completed_ids) -> PrerequisiteCheck:
    if not Course.objects.filter(pk=course_id).exists():
        raise NotFoundError("Course not found.")
    return evaluate_logic_sets(group_logic_sets(_prerequisite_rows([course_id])), completed_ids)


class PrerequisiteResolver:
    """Resolve many courses against one query's worth of dependency rows."""

    def __init__(self, course_ids: Iterable[int] = ()):
        self._logic_sets: dict[int, dict[int, list[tuple[int, str]]]] = {}
        self.load(course_ids)

    def load(self, course_ids: Iterable[int]) -> None:
        pending = {course_id for course_id in course_ids if course_id not in self._logic_sets}
        if not pending:
            return
        known = set(Course.objects.filter(pk__in=pending).values_list("pk", flat=True))
        rows_by_course = defaultdict(list)
        for dependency in _prerequisite_rows(known):
            rows_by_course[dependency.course_id].append(dependency)
        for course_id in known:
            self._logic_sets[course_id] = group_logic_sets(rows_by_course.get(course_id, []))

    def check(self, course_id: int, completed_ids) -> PrerequisiteCheck:
        if course_id not in self._logic_sets:
            self.load([course_id])
        if course_id not in self._logic_sets:
            raise NotFoundError("Course not found.")
        return evaluate_logic_sets(self._logic_sets[course_id], completed_ids)


def audit_completed_ids(student_id: int) -> set[int]:
    """Courses that count as completed for the degree audit: passed or transferred in."""

    records = TranscriptRecord.objects.filter(
        student_id=student_id,
        status__in=[TranscriptRecord.COMPLETED, TranscriptRecord.TRANSFER],
    ).values_list("course_id", "grade")
    return {course_id for course_id, grade in records if is_passing_grade(grade)}


def plan_completed_ids(student_id: int) -> set[int]:
    """Courses that count as completed when planning ahead, including ones under way."""

    return set(
        TranscriptRecord.objects.filter(
            student_id=student_id,
            status__in=[TranscriptRecord.COMPLETED, TranscriptRecord.IN_PROGRESS],
        ).values_list("course_id", flat=True)
    )
