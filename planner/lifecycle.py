"""Planned-course mutations and the semester review workflow.

A semester's review state is not stored; it is derived from the statuses of
its planned courses by :func:`derive_semester_status`. Every mutation runs in
one transaction with the semester row locked, and refuses to touch a locked
semester.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable

from django.db import transaction
from django.db.models import Max
from django.utils import timezone

from .errors import (
    ActionResult,
    AdvisorNotAssigned,
    GuardViolation,
    IntegrityViolation,
    NotFoundError,
    plan_action,
)
from .models import (
    Course,
    PlanDraft,
    PlanEntry,
    PlanReviewLog,
    PlanSemester,
    Semester,
    SemesterApproval,
    StudentProfile,
)
from .prerequisites import audit_completed_ids, plan_completed_ids, resolve_prerequisites
from .validation import check_credit_load, credit_load_messages, semester_credits, validate_semester_plan

logger = logging.getLogger(__name__)

DRAFT = PlanEntry.DRAFT
SUBMITTED = PlanEntry.SUBMITTED
APPROVED = PlanEntry.APPROVED
REJECTED = PlanEntry.REJECTED


def derive_semester_status(statuses: Iterable[str]) -> str:
    """Map entry statuses to the semester state.

    No entries is DRAFT. All APPROVED is APPROVED. Any REJECTED is REJECTED.
    All SUBMITTED or APPROVED is SUBMITTED. Anything else is DRAFT.
    """

    statuses = list(statuses)
    if not statuses:
        return DRAFT
    if all(status == APPROVED for status in statuses):
        return APPROVED
    if any(status == REJECTED for status in statuses):
        return REJECTED
    if all(status in (SUBMITTED, APPROVED) for status in statuses):
        return SUBMITTED
    return DRAFT


@dataclass
class PlannedCourse:
    entry_id: int
    course_id: int
    code: str
    title: str
    credits: Decimal
    status: str
    prereqs_met: bool
    order: int


@dataclass
class SemesterPlan:
    draft_id: int
    semester_number: int
    term: str
    year: int
    label: str
    is_locked: bool
    status: str
    total_credits: Decimal
    courses: list[PlannedCourse] = field(default_factory=list)
    approval_status: str | None = None
    advisor_comments: str = ""
    warnings: list[str] = field(default_factory=list)


def _get_draft(student_id: int, draft_id: int) -> PlanDraft:
    try:
        return PlanDraft.objects.get(pk=draft_id, student_id=student_id)
    except PlanDraft.DoesNotExist:
        raise NotFoundError("Plan draft not found.") from None


def _get_semester(draft: PlanDraft, semester_number: int, for_update: bool = False) -> PlanSemester:
    queryset = PlanSemester.objects.filter(draft=draft, semester_number=semester_number)
    if for_update:
        queryset = queryset.select_for_update()
    semester = queryset.first()
    if semester is None:
        raise NotFoundError(f"Semester {semester_number} is not part of this plan.")
    return semester


def _ensure_unlocked(semester: PlanSemester) -> None:
    if semester.is_locked:
        raise GuardViolation(f"{semester.label} is locked and cannot be changed.")


def _get_entry(draft: PlanDraft, course_id: int) -> PlanEntry:
    entry = PlanEntry.objects.filter(draft=draft, course_id=course_id).select_related("course").first()
    if entry is None:
        raise NotFoundError("That course is not in this plan.")
    return entry


def _semester_entries(draft: PlanDraft, semester_number: int) -> list[PlanEntry]:
    return list(
        PlanEntry.objects.filter(draft=draft, semester_number=semester_number)
        .select_related("course")
        .order_by("semester_order", "id")
    )


def _next_order(draft: PlanDraft, semester_number: int) -> int:
    current = PlanEntry.objects.filter(draft=draft, semester_number=semester_number).aggregate(
        highest=Max("semester_order")
    )["highest"]
    return 0 if current is None else current + 1


def _assigned_profile(student_id: int, advisor_id: int) -> StudentProfile:
    profile = StudentProfile.objects.filter(user_id=student_id).first()
    if profile is None:
        raise NotFoundError("Student profile not found.")
    if profile.advisor_id is None or profile.advisor_id != advisor_id:
        raise AdvisorNotAssigned("You are not the assigned advisor for this student.")
    return profile


def _academic_term(semester: PlanSemester) -> Semester:
    term, _ = Semester.objects.get_or_create(
        term=semester.term, year=semester.year, defaults={"name": semester.label}
    )
    return term


def _ensure_term_open(student_id: int, draft: PlanDraft, term: Semester) -> None:
    # One approval record per student and term; another draft may only take it over once it was sent back.
    existing = (
        SemesterApproval.objects.select_for_update()
        .filter(student_id=student_id, semester=term)
        .first()
    )
    if existing is None or existing.draft_id is None or existing.draft_id == draft.pk:
        return
    if existing.status == SemesterApproval.APPROVED:
        raise GuardViolation(f"{term} has already been approved from the draft '{existing.draft.name}'.")
    if existing.status == SemesterApproval.PENDING:
        raise GuardViolation(f"{term} is already awaiting review from the draft '{existing.draft.name}'.")


def _log_review(draft: PlanDraft, semester_number: int, action: str, actor_id: int | None, comments: str = "") -> None:
    PlanReviewLog.objects.create(
        student_id=draft.student_id,
        draft=draft,
        semester_number=semester_number,
        action=action,
        actor_id=actor_id,
        comments=comments,
    )


@plan_action
def add_course_to_plan(student_id: int, draft_id: int, course_id: int, semester_number: int) -> ActionResult:
    with transaction.atomic():
        draft = _get_draft(student_id, draft_id)
        semester = _get_semester(draft, semester_number, for_update=True)
        _ensure_unlocked(semester)
        course = Course.objects.filter(pk=course_id, is_active=True).first()
        if course is None:
            raise NotFoundError("Course not found or no longer offered.")
        existing = PlanEntry.objects.filter(draft=draft, course=course).first()
        if existing is not None:
            raise IntegrityViolation(
                f"{course.code} is already planned in semester {existing.semester_number} of this draft."
            )
        warnings = check_credit_load(semester_credits(draft.pk, semester_number), course.credits)
        entry = PlanEntry.objects.create(
            student_id=student_id,
            draft=draft,
            course=course,
            semester_number=semester_number,
            semester_order=_next_order(draft, semester_number),
            status=DRAFT,
            prereqs_met=False,
        )

    if course.pk in audit_completed_ids(student_id):
        warnings.append(f"{course.code} has already been completed.")
    check = resolve_prerequisites(course.pk, plan_completed_ids(student_id))
    if not check.satisfied:
        warnings.append(f"{course.code} is missing prerequisites: {', '.join(check.missing)}")
    logger.info("Student %s planned %s in draft %s semester %s", student_id, course.code, draft.pk, semester_number)
    return ActionResult.ok(f"Added {course.code} to {semester.label}.", warnings, entry_id=entry.pk)


@plan_action
def remove_course_from_plan(student_id: int, draft_id: int, course_id: int) -> ActionResult:
    with transaction.atomic():
        draft = _get_draft(student_id, draft_id)
        entry = _get_entry(draft, course_id)
        semester = _get_semester(draft, entry.semester_number, for_update=True)
        _ensure_unlocked(semester)
        code = entry.course.code
        entry.delete()
    logger.info("Student %s removed %s from draft %s", student_id, code, draft.pk)
    return ActionResult.ok(f"Removed {code} from {semester.label}.")


@plan_action
def move_course(
    student_id: int, draft_id: int, course_id: int, semester_number: int, order: int | None = None
) -> ActionResult:
    with transaction.atomic():
        draft = _get_draft(student_id, draft_id)
        entry = _get_entry(draft, course_id)
        numbers = sorted({entry.semester_number, semester_number})
        semesters = {
            semester.semester_number: semester
            for semester in PlanSemester.objects.select_for_update()
            .filter(draft=draft, semester_number__in=numbers)
            .order_by("semester_number")
        }
        for number in (entry.semester_number, semester_number):
            if number not in semesters:
                raise NotFoundError(f"Semester {number} is not part of this plan.")
            _ensure_unlocked(semesters[number])

        warnings = []
        if semester_number != entry.semester_number:
            warnings = check_credit_load(semester_credits(draft.pk, semester_number), entry.course.credits)
            if order is None:
                order = _next_order(draft, semester_number)
        elif order is None:
            order = entry.semester_order
        entry.semester_number = semester_number
        entry.semester_order = order
        entry.save(update_fields=["semester_number", "semester_order", "updated_at"])
    target = semesters[semester_number]
    logger.info("Student %s moved %s to semester %s of draft %s", student_id, entry.course.code, semester_number, draft.pk)
    return ActionResult.ok(f"Moved {entry.course.code} to {target.label}.", warnings)


@plan_action
def submit_plan(student_id: int, draft_id: int, semester_number: int) -> ActionResult:
    with transaction.atomic():
        draft = _get_draft(student_id, draft_id)
        semester = _get_semester(draft, semester_number, for_update=True)
        entries = _semester_entries(draft, semester_number)
        if not entries:
            raise GuardViolation("No courses are planned for this semester.")
        state = derive_semester_status(entry.status for entry in entries)
        if state == APPROVED:
            raise GuardViolation("This semester has already been approved.")
        if state == SUBMITTED:
            raise GuardViolation("This semester has already been submitted and is awaiting review.")
        if state == REJECTED:
            raise GuardViolation("Revise the returned plan before submitting it again.")
        _ensure_unlocked(semester)
        profile = StudentProfile.objects.filter(user_id=student_id).first()
        if profile is None:
            raise NotFoundError("Student profile not found.")
        if profile.advisor_id is None:
            raise GuardViolation("No advisor is assigned to review this plan.")

        term = _academic_term(semester)
        _ensure_term_open(student_id, draft, term)

        validation = validate_semester_plan(student_id, draft.pk, semester_number, entries)
        now = timezone.now()
        draft_ids = {entry.pk for entry in entries if entry.status == DRAFT}
        unmet = {check.entry_id for check in validation.unmet}
        PlanEntry.objects.filter(pk__in=draft_ids - unmet).update(status=SUBMITTED, prereqs_met=True, updated_at=now)
        PlanEntry.objects.filter(pk__in=draft_ids & unmet).update(status=SUBMITTED, prereqs_met=False, updated_at=now)
        semester.is_locked = True
        semester.save(update_fields=["is_locked"])
        approval, _ = SemesterApproval.objects.update_or_create(
            student_id=student_id,
            semester=term,
            defaults={
                "advisor_id": profile.advisor_id,
                "status": SemesterApproval.PENDING,
                "comments": "",
                "draft": draft,
            },
        )
        _log_review(draft, semester_number, "submitted", student_id)
    logger.info("Student %s submitted draft %s semester %s", student_id, draft.pk, semester_number)
    return ActionResult.ok(
        "Semester submitted for advisor review.", validation.warnings, approval_id=approval.pk
    )


@plan_action
def approve_plan(
    advisor_id: int, student_id: int, draft_id: int, semester_number: int, comments: str = ""
) -> ActionResult:
    comments = (comments or "").strip()
    with transaction.atomic():
        _assigned_profile(student_id, advisor_id)
        draft = _get_draft(student_id, draft_id)
        semester = _get_semester(draft, semester_number, for_update=True)
        entries = _semester_entries(draft, semester_number)
        if not entries:
            raise GuardViolation("No courses are planned for this semester.")
        if any(entry.status not in (SUBMITTED, APPROVED) for entry in entries):
            raise GuardViolation("Only submitted plans can be approved.")
        if all(entry.status == APPROVED for entry in entries):
            raise GuardViolation("This semester has already been approved.")
        PlanEntry.objects.filter(pk__in=[entry.pk for entry in entries], status=SUBMITTED).update(
            status=APPROVED, updated_at=timezone.now()
        )
        semester.is_locked = True
        semester.save(update_fields=["is_locked"])
        approval, _ = SemesterApproval.objects.update_or_create(
            student_id=student_id,
            semester=_academic_term(semester),
            defaults={
                "advisor_id": advisor_id,
                "status": SemesterApproval.APPROVED,
                "comments": comments,
                "draft": draft,
            },
        )
        _log_review(draft, semester_number, "approved", advisor_id, comments)
    logger.info("Advisor %s approved draft %s semester %s", advisor_id, draft.pk, semester_number)
    return ActionResult.ok("Semester plan approved.", approval_id=approval.pk)


@plan_action
def reject_plan(advisor_id: int, student_id: int, draft_id: int, semester_number: int, comments: str) -> ActionResult:
    comments = (comments or "").strip()
    if not comments:
        raise GuardViolation("Comments are required when sending a plan back for revision.")
    with transaction.atomic():
        _assigned_profile(student_id, advisor_id)
        draft = _get_draft(student_id, draft_id)
        semester = _get_semester(draft, semester_number, for_update=True)
        entries = _semester_entries(draft, semester_number)
        submitted = [entry.pk for entry in entries if entry.status == SUBMITTED]
        if not submitted:
            raise GuardViolation("Only submitted plans can be sent back for revision.")
        PlanEntry.objects.filter(pk__in=submitted).update(status=REJECTED, updated_at=timezone.now())
        semester.is_locked = False
        semester.save(update_fields=["is_locked"])
        approval, _ = SemesterApproval.objects.update_or_create(
            student_id=student_id,
            semester=_academic_term(semester),
            defaults={
                "advisor_id": advisor_id,
                "status": SemesterApproval.NEEDS_REVISION,
                "comments": comments,
                "draft": draft,
            },
        )
        _log_review(draft, semester_number, "rejected", advisor_id, comments)
    logger.info("Advisor %s sent back draft %s semester %s", advisor_id, draft.pk, semester_number)
    return ActionResult.ok("Plan sent back to the student for revision.", approval_id=approval.pk)


@plan_action
def revise_plan(student_id: int, draft_id: int, semester_number: int) -> ActionResult:
    with transaction.atomic():
        draft = _get_draft(student_id, draft_id)
        semester = _get_semester(draft, semester_number, for_update=True)
        rejected = [entry.pk for entry in _semester_entries(draft, semester_number) if entry.status == REJECTED]
        if not rejected:
            raise GuardViolation("Only plans sent back by the advisor can be revised.")
        PlanEntry.objects.filter(pk__in=rejected).update(status=DRAFT, prereqs_met=False, updated_at=timezone.now())
        if semester.is_locked:
            semester.is_locked = False
            semester.save(update_fields=["is_locked"])
        _log_review(draft, semester_number, "revised", student_id)
    logger.info("Student %s reopened draft %s semester %s", student_id, draft.pk, semester_number)
    return ActionResult.ok("Plan reopened for editing.", updated=len(rejected))


def _semester_plan(draft: PlanDraft, semester: PlanSemester, entries: list[PlanEntry], approval) -> SemesterPlan:
    total = sum((entry.course.credits for entry in entries), Decimal("0"))
    return SemesterPlan(
        draft_id=draft.pk,
        semester_number=semester.semester_number,
        term=semester.term,
        year=semester.year,
        label=semester.label,
        is_locked=semester.is_locked,
        status=derive_semester_status(entry.status for entry in entries),
        total_credits=total,
        courses=[
            PlannedCourse(
                entry_id=entry.pk,
                course_id=entry.course_id,
                code=entry.course.code,
                title=entry.course.title,
                credits=entry.course.credits,
                status=entry.status,
                prereqs_met=entry.prereqs_met,
                order=entry.semester_order,
            )
            for entry in entries
        ],
        approval_status=approval.status if approval else None,
        advisor_comments=approval.comments if approval else "",
        warnings=credit_load_messages(total),
    )


def get_semester_plan(student_id: int, draft_id: int, semester_number: int) -> SemesterPlan:
    draft = _get_draft(student_id, draft_id)
    semester = _get_semester(draft, semester_number)
    approval = SemesterApproval.objects.filter(
        student_id=student_id, draft=draft, semester__term=semester.term, semester__year=semester.year
    ).first()
    return _semester_plan(draft, semester, _semester_entries(draft, semester_number), approval)


def get_plan(student_id: int, draft_id: int) -> list[SemesterPlan]:
    """Every semester of a draft, in order, with its derived state."""

    draft = _get_draft(student_id, draft_id)
    semesters = list(PlanSemester.objects.filter(draft=draft).order_by("semester_number"))
    entries_by_number: dict[int, list[PlanEntry]] = {}
    for entry in PlanEntry.objects.filter(draft=draft).select_related("course").order_by("semester_order", "id"):
        entries_by_number.setdefault(entry.semester_number, []).append(entry)
    approvals = {
        (approval.semester.term, approval.semester.year): approval
        for approval in SemesterApproval.objects.filter(student_id=student_id, draft=draft).select_related("semester")
    }
    return [
        _semester_plan(
            draft,
            semester,
            entries_by_number.get(semester.semester_number, []),
            approvals.get((semester.term, semester.year)),
        )
        for semester in semesters
    ]
