"""Planner settings, read from Django settings with built-in defaults."""
from __future__ import annotations

from decimal import Decimal

from django.conf import settings

DEFAULT_PASSING_GRADES = (
    "A", "A-", "B+", "B", "B-", "C+", "C", "C-", "D+", "D", "D-", "P", "CR",
)


def normal_credit_limit() -> Decimal:
    return Decimal(str(getattr(settings, "PLANNER_NORMAL_CREDIT_LIMIT", 18)))


def max_credit_limit() -> Decimal:
    return Decimal(str(getattr(settings, "PLANNER_MAX_CREDIT_LIMIT", 21)))


def passing_grades() -> frozenset[str]:
    grades = getattr(settings, "PLANNER_PASSING_GRADES", DEFAULT_PASSING_GRADES)
    return frozenset(grade.upper() for grade in grades)


def default_semester_count() -> int:
    return int(getattr(settings, "PLANNER_DEFAULT_SEMESTER_COUNT", 8))


def default_draft_name() -> str:
    return getattr(settings, "PLANNER_DEFAULT_DRAFT_NAME", "Default Plan")


def is_passing_grade(grade: str | None) -> bool:
    if not grade:
        return False
    return grade.strip().upper() in passing_grades()
