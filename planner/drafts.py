"""Plan drafts and their semester definitions."""
from __future__ import annotations

import logging

from django.db import transaction

from .conf import default_draft_name, default_semester_count
from .errors import ActionResult, GuardViolation, IntegrityViolation, NotFoundError, plan_action
from .models import PlanDraft, PlanEntry, PlanSemester, StudentProfile, TranscriptRecord

logger = logging.getLogger(__name__)

MAX_DRAFT_NAME_LENGTH = 100


def historical_semester_count(student_id: int) -> int:
    """Number of distinct terms that already appear on the student's transcript."""

    return (
        TranscriptRecord.objects.filter(student_id=student_id, semester__isnull=False)
        .values("semester_id")
        .distinct()
        .count()
    )


def next_term(term: str, year: int, force_summer: bool = False) -> tuple[str, int]:
    """The term that follows ``term``/``year``; summer is only used when asked for."""

    if force_summer:
        return "SUMMER", year if term == "SPRING" else year + 1
    if term == "FALL":
        return "SPRING", year + 1
    return "FALL", year


def _enrollment_year(student_id: int) -> int:
    profile = StudentProfile.objects.filter(user_id=student_id).first()
    if profile is None:
        raise NotFoundError("Student profile not found.")
    return profile.enrollment_year


def generate_semesters(draft: PlanDraft, enrollment_year: int, count: int | None = None) -> list[PlanSemester]:
    """Create alternating Fall/Spring semesters from the enrollment year.

    Semesters already covered by transcript history are created locked.
    """

    count = default_semester_count() if count is None else count
    locked = historical_semester_count(draft.student_id)
    semesters = [
        PlanSemester(
            draft=draft,
            semester_number=index + 1,
            term="FALL" if index % 2 == 0 else "SPRING",
            year=enrollment_year + (index + 1) // 2,
            is_locked=index < locked,
        )
        for index in range(count)
    ]
    return PlanSemester.objects.bulk_create(semesters)


def _clean_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise GuardViolation("Draft name is required.")
    if len(name) > MAX_DRAFT_NAME_LENGTH:
        raise GuardViolation(f"Draft name must be {MAX_DRAFT_NAME_LENGTH} characters or less.")
    return name


def _ensure_unique_name(student_id: int, name: str, exclude_pk: int | None = None) -> None:
    clash = PlanDraft.objects.filter(student_id=student_id, name=name)
    if exclude_pk is not None:
        clash = clash.exclude(pk=exclude_pk)
    if clash.exists():
        raise IntegrityViolation("A draft with this name already exists.")


def _get_draft(student_id: int, draft_id: int, for_update: bool = False) -> PlanDraft:
    queryset = PlanDraft.objects.filter(pk=draft_id, student_id=student_id)
    if for_update:
        queryset = queryset.select_for_update()
    draft = queryset.first()
    if draft is None:
        raise NotFoundError("Plan draft not found.")
    return draft


def get_default_draft(student_id: int) -> PlanDraft:
    """Return the student's default draft, creating it with its semesters on first use."""

    draft = PlanDraft.objects.filter(student_id=student_id, is_default=True).first()
    if draft is not None:
        return draft
    enrollment_year = _enrollment_year(student_id)
    with transaction.atomic():
        draft, created = PlanDraft.objects.get_or_create(
            student_id=student_id, name=default_draft_name(), defaults={"is_default": True}
        )
        if not created and not draft.is_default:
            draft.is_default = True
            draft.save(update_fields=["is_default", "updated_at"])
        if created:
            generate_semesters(draft, enrollment_year)
            logger.info("Created default draft %s for student %s", draft.pk, student_id)
    return draft


@plan_action
def create_draft(student_id: int, name: str) -> ActionResult:
    name = _clean_name(name)
    with transaction.atomic():
        enrollment_year = _enrollment_year(student_id)
        _ensure_unique_name(student_id, name)
        is_default = not PlanDraft.objects.filter(student_id=student_id, is_default=True).exists()
        draft = PlanDraft.objects.create(student_id=student_id, name=name, is_default=is_default)
        semesters = generate_semesters(draft, enrollment_year)
    logger.info("Student %s created draft %s (%s)", student_id, draft.pk, name)
    return ActionResult.ok(f"Draft '{name}' created.", draft_id=draft.pk, semesters=len(semesters))


@plan_action
def rename_draft(student_id: int, draft_id: int, name: str) -> ActionResult:
    name = _clean_name(name)
    with transaction.atomic():
        draft = _get_draft(student_id, draft_id, for_update=True)
        _ensure_unique_name(student_id, name, exclude_pk=draft.pk)
        draft.name = name
        draft.save(update_fields=["name", "updated_at"])
    return ActionResult.ok("Draft renamed.", draft_id=draft.pk)


@plan_action
def delete_draft(student_id: int, draft_id: int) -> ActionResult:
    with transaction.atomic():
        draft = _get_draft(student_id, draft_id, for_update=True)
        if draft.is_default:
            raise GuardViolation("The default draft cannot be deleted.")
        draft.delete()
    logger.info("Student %s deleted draft %s", student_id, draft_id)
    return ActionResult.ok("Draft deleted.")


@plan_action
def set_default_draft(student_id: int, draft_id: int) -> ActionResult:
    with transaction.atomic():
        draft = _get_draft(student_id, draft_id, for_update=True)
        PlanDraft.objects.filter(student_id=student_id, is_default=True).exclude(pk=draft.pk).update(
            is_default=False
        )
        if not draft.is_default:
            draft.is_default = True
            draft.save(update_fields=["is_default", "updated_at"])
    return ActionResult.ok(f"'{draft.name}' is now the default draft.", draft_id=draft.pk)


@plan_action
def add_semester(student_id: int, draft_id: int, force_summer: bool = False) -> ActionResult:
    with transaction.atomic():
        draft = _get_draft(student_id, draft_id, for_update=True)
        last = PlanSemester.objects.filter(draft=draft).order_by("-semester_number").first()
        if last is None:
            number, term, year = 1, "SUMMER" if force_summer else "FALL", _enrollment_year(student_id)
        else:
            term, year = next_term(last.term, last.year, force_summer)
            number = last.semester_number + 1
        semester = PlanSemester.objects.create(draft=draft, semester_number=number, term=term, year=year)
    return ActionResult.ok(f"Added {semester.label}.", semester_number=number)


@plan_action
def remove_semester(student_id: int, draft_id: int, semester_number: int) -> ActionResult:
    with transaction.atomic():
        draft = _get_draft(student_id, draft_id)
        semester = (
            PlanSemester.objects.select_for_update()
            .filter(draft=draft, semester_number=semester_number)
            .first()
        )
        if semester is None:
            raise NotFoundError(f"Semester {semester_number} is not part of this plan.")
        if semester.is_locked:
            raise GuardViolation(f"{semester.label} is locked and cannot be removed.")
        removed, _ = PlanEntry.objects.filter(draft=draft, semester_number=semester_number).delete()
        semester.delete()
    return ActionResult.ok(f"Removed {semester.label}.", courses_removed=removed)
