"""Plan-time checks: semester credit load and prerequisite readiness of planned courses."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from django.db.models import Sum

from .conf import max_credit_limit, normal_credit_limit
from .errors import CapacityViolation
from .models import PlanEntry
from .prerequisites import PrerequisiteResolver, plan_completed_ids


@dataclass
class EntryCheck:
    entry_id: int
    course_id: int
    course_code: str
    prereqs_met: bool
    missing: list[str] = field(default_factory=list)


@dataclass
class SemesterValidation:
    total_credits: Decimal
    warnings: list[str] = field(default_factory=list)
    entry_checks: list[EntryCheck] = field(default_factory=list)

    @property
    def unmet(self) -> list[EntryCheck]:
        return [check for check in self.entry_checks if not check.prereqs_met]


def credit_load_messages(total_credits) -> list[str]:
    total = Decimal(total_credits)
    if total > max_credit_limit():
        return [f"{total} credits exceeds the maximum of {max_credit_limit()} credits per semester."]
    if total > normal_credit_limit():
        return [f"{total} credits is above the normal load of {normal_credit_limit()} credits."]
    return []


def check_credit_load(current_credits, added_credits=0) -> list[str]:
    """Warn between the normal and maximum limits; refuse above the maximum."""

    total = Decimal(current_credits) + Decimal(added_credits)
    if total > max_credit_limit():
        raise CapacityViolation(
            f"Adding this course brings the semester to {total} credits; "
            f"the maximum is {max_credit_limit()}."
        )
    return credit_load_messages(total)


def semester_credits(draft_id: int, semester_number: int) -> Decimal:
    total = PlanEntry.objects.filter(draft_id=draft_id, semester_number=semester_number).aggregate(
        total=Sum("course__credits")
    )["total"]
    return total or Decimal("0")


def validate_semester_plan(student_id: int, draft_id: int, semester_number: int, entries=None) -> SemesterValidation:
    """Check a whole semester before it goes to the advisor.

    Courses from the transcript and from earlier semesters of the same draft
    count toward prerequisites. Unmet prerequisites are reported as warnings;
    a credit total above the maximum raises ``CapacityViolation``.
    """

    if entries is None:
        entries = list(
            PlanEntry.objects.filter(draft_id=draft_id, semester_number=semester_number).select_related("course")
        )
    total = sum((entry.course.credits for entry in entries), Decimal("0"))
    if total > max_credit_limit():
        raise CapacityViolation(
            f"This semester has {total} credits; the maximum is {max_credit_limit()}. Remove a course before submitting."
        )
    result = SemesterValidation(total_credits=total, warnings=credit_load_messages(total))

    completed = plan_completed_ids(student_id)
    completed.update(
        PlanEntry.objects.filter(draft_id=draft_id, semester_number__lt=semester_number).values_list(
            "course_id", flat=True
        )
    )
    resolver = PrerequisiteResolver(entry.course_id for entry in entries)
    for entry in entries:
        check = resolver.check(entry.course_id, completed)
        result.entry_checks.append(
            EntryCheck(entry.pk, entry.course_id, entry.course.code, check.satisfied, check.missing)
        )
        if not check.satisfied:
            result.warnings.append(f"{entry.course.code} is missing prerequisites: {', '.join(check.missing)}")
    return result
