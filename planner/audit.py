"""Degree audit: per-program bucket trees and the combined, de-duplicated progress figure."""
from __future__ import annotations

import datetime
import logging
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from decimal import Decimal

from django.utils import timezone

from .buckets import (
    COUNTS_AS_DONE,
    DONE,
    IN_PROGRESS,
    MISSING,
    WAIVED,
    ZERO,
    Bucket,
    CourseAuditStatus,
    best_status_map,
    build_bucket_tree,
    is_better,
    iter_buckets,
    percent_of,
)
from .conf import is_passing_grade
from .models import (
    CourseOverride,
    Program,
    RequirementGroup,
    RequirementGroupCourse,
    StudentProfile,
    StudentProgram,
    TranscriptRecord,
)

logger = logging.getLogger(__name__)

INFO = "INFO"
MISSING_PREREQS = "MISSING_PREREQS"

PROFILE_MISSING_MESSAGE = "Student profile not found. Please contact your advisor."
NO_PROGRAMS_MESSAGE = "No academic programs found for this student. Please assign a major/minor."


@dataclass
class AuditWarning:
    kind: str
    message: str
    course_code: str = ""


@dataclass
class OverallProgress:
    percent_complete: int = 0
    credits_done: Decimal = ZERO
    credits_in_progress: Decimal = ZERO
    credits_required: Decimal = ZERO
    courses_done: int = 0
    total_courses: int = 0


@dataclass
class ProgramAudit:
    program_id: int
    program_code: str
    program_name: str
    program_type: str
    overall: OverallProgress
    buckets: list[Bucket]
    warnings: list[AuditWarning] = field(default_factory=list)


@dataclass
class UnassignedCourse:
    course_id: int
    code: str
    title: str
    credits: Decimal
    status: str
    grade: str = ""
    semester: str = ""


@dataclass
class DegreeAudit:
    student_id: int
    major: ProgramAudit | None = None
    minor: ProgramAudit | None = None
    concentration: ProgramAudit | None = None
    combined: OverallProgress = field(default_factory=OverallProgress)
    warnings: list[AuditWarning] = field(default_factory=list)
    unassigned_courses: list[UnassignedCourse] = field(default_factory=list)
    generated_at: datetime.datetime = field(default_factory=timezone.now)

    @property
    def programs(self) -> list[ProgramAudit]:
        return [audit for audit in (self.major, self.minor, self.concentration) if audit is not None]

    def as_dict(self) -> dict:
        return asdict(self)


def course_status(course_id: int, records_by_course, waived_ids) -> tuple[str, str]:
    """Return ``(status, grade)`` for one requirement course.

    Waived and passed courses outrank work in progress, which outranks
    missing courses. Failed attempts leave a course missing.
    """

    if course_id in waived_ids:
        return WAIVED, ""
    records = records_by_course.get(course_id, [])
    for record in records:
        if record.status in (TranscriptRecord.COMPLETED, TranscriptRecord.TRANSFER) and is_passing_grade(record.grade):
            return DONE, record.grade
    for record in records:
        if record.status == TranscriptRecord.IN_PROGRESS:
            return IN_PROGRESS, record.grade
    return MISSING, records[-1].grade if records else ""


def record_status(record: TranscriptRecord) -> str:
    if record.status in (TranscriptRecord.COMPLETED, TranscriptRecord.TRANSFER) and is_passing_grade(record.grade):
        return DONE
    if record.status == TranscriptRecord.IN_PROGRESS:
        return IN_PROGRESS
    return MISSING


def is_failed_attempt(record: TranscriptRecord) -> bool:
    if record.status == TranscriptRecord.FAILED:
        return True
    return record.status == TranscriptRecord.COMPLETED and not is_passing_grade(record.grade)


def load_transcript(student_id: int) -> list[TranscriptRecord]:
    return list(
        TranscriptRecord.objects.filter(student_id=student_id)
        .select_related("course", "semester")
        .order_by("id")
    )


def waived_course_ids(student_id: int, transcript: list[TranscriptRecord]) -> set[int]:
    """Requirement courses covered by an advisor waiver or a completed substitute."""

    passed = {record.course_id for record in transcript if record_status(record) == DONE}
    waived = set()
    for override in CourseOverride.objects.filter(student_id=student_id):
        if override.override_type == CourseOverride.WAIVER or override.substitute_course_id in passed:
            waived.add(override.course_id)
    return waived


def _retake_warnings(transcript: list[TranscriptRecord], records_by_course) -> list[AuditWarning]:
    warnings = []
    for record in transcript:
        if not is_failed_attempt(record):
            continue
        status, _ = course_status(record.course_id, records_by_course, set())
        if status == DONE:
            continue
        warnings.append(
            AuditWarning(
                INFO,
                f"{record.course.code} needs to be retaken (Grade: {record.grade or 'F'})",
                record.course.code,
            )
        )
    return warnings


def _index_transcript(transcript: list[TranscriptRecord]) -> dict[int, list[TranscriptRecord]]:
    records_by_course = defaultdict(list)
    for record in transcript:
        records_by_course[record.course_id].append(record)
    return records_by_course


def audit_program(
    student_id: int,
    program: Program,
    transcript: list[TranscriptRecord] | None = None,
    waived_ids: set[int] | None = None,
) -> ProgramAudit:
    """Build one program's bucket tree for a student and measure it against the program total."""

    if transcript is None:
        transcript = load_transcript(student_id)
    if waived_ids is None:
        waived_ids = waived_course_ids(student_id, transcript)
    records_by_course = _index_transcript(transcript)

    groups = list(RequirementGroup.objects.filter(program=program).order_by("sort_order", "id"))
    links = (
        RequirementGroupCourse.objects.filter(group__program=program)
        .select_related("course")
        .order_by("-is_mandatory", "course__code")
    )
    courses_by_group = defaultdict(list)
    for link in links:
        status, grade = course_status(link.course_id, records_by_course, waived_ids)
        courses_by_group[link.group_id].append(
            CourseAuditStatus(
                course_id=link.course_id,
                code=link.course.code,
                title=link.course.title,
                credits=link.course.credits,
                status=status,
                is_mandatory=link.is_mandatory,
                grade=grade,
            )
        )

    roots = build_bucket_tree(
        [
            Bucket(
                group_id=group.pk,
                name=group.name,
                parent_id=group.parent_id,
                credits_required=group.credits_required,
                min_courses_required=group.min_courses_required,
                courses=courses_by_group[group.pk],
            )
            for group in groups
        ]
    )

    warnings = _retake_warnings(transcript, records_by_course)
    for bucket in iter_buckets(roots):
        for course in bucket.courses:
            if course.is_mandatory and course.status == MISSING:
                warnings.append(
                    AuditWarning(MISSING_PREREQS, f"{course.code} is required for {bucket.name}", course.code)
                )

    best = best_status_map(roots)
    credits_done = sum((c.credits for c in best.values() if c.status in COUNTS_AS_DONE), ZERO)
    credits_in_progress = sum((c.credits for c in best.values() if c.status == IN_PROGRESS), ZERO)
    overall = OverallProgress(
        percent_complete=percent_of(credits_done, ZERO, program.total_credits_required),
        credits_done=credits_done,
        credits_in_progress=credits_in_progress,
        credits_required=program.total_credits_required,
        courses_done=sum(1 for c in best.values() if c.status in COUNTS_AS_DONE),
        total_courses=len(best),
    )
    return ProgramAudit(
        program_id=program.pk,
        program_code=program.code,
        program_name=program.name,
        program_type=program.program_type,
        overall=overall,
        buckets=roots,
        warnings=warnings,
    )


def _pick_assignment(assignments: list[StudentProgram], program_type: str) -> StudentProgram | None:
    # assignments arrive primary-first
    for assignment in assignments:
        if assignment.program.program_type == program_type:
            return assignment
    return None


def _empty_audit(student_id: int, message: str) -> DegreeAudit:
    logger.info("Audit for student %s short-circuited: %s", student_id, message)
    return DegreeAudit(student_id=student_id, warnings=[AuditWarning(INFO, message)])


def run_degree_audit(student_id: int) -> DegreeAudit:
    """Audit every assigned program and merge them into one combined progress figure.

    Each course is counted once, at its best status across all programs. The
    major's total credits are the baseline when a major with a positive total is
    assigned, otherwise the totals of all assigned programs are summed.
    """

    if not StudentProfile.objects.filter(user_id=student_id).exists():
        return _empty_audit(student_id, PROFILE_MISSING_MESSAGE)
    assignments = list(
        StudentProgram.objects.filter(student_id=student_id)
        .select_related("program")
        .order_by("-is_primary", "id")
    )
    if not assignments:
        return _empty_audit(student_id, NO_PROGRAMS_MESSAGE)

    transcript = load_transcript(student_id)
    waived_ids = waived_course_ids(student_id, transcript)
    result = DegreeAudit(student_id=student_id)
    for attribute, program_type in (
        ("major", Program.MAJOR),
        ("minor", Program.MINOR),
        ("concentration", Program.CONCENTRATION),
    ):
        assignment = _pick_assignment(assignments, program_type)
        if assignment is not None:
            setattr(result, attribute, audit_program(student_id, assignment.program, transcript, waived_ids))

    best: dict[int, CourseAuditStatus] = {}
    for program_audit in result.programs:
        best_status_map(program_audit.buckets, into=best)

    credits_done = sum((c.credits for c in best.values() if c.status in COUNTS_AS_DONE), ZERO)
    credits_in_progress = sum((c.credits for c in best.values() if c.status == IN_PROGRESS), ZERO)
    baseline = result.major.overall.credits_required if result.major is not None else ZERO
    if baseline <= 0:
        baseline = sum((audit.overall.credits_required for audit in result.programs), ZERO)
    result.combined = OverallProgress(
        percent_complete=percent_of(credits_done, credits_in_progress, baseline) if baseline > 0 else 0,
        credits_done=credits_done,
        credits_in_progress=credits_in_progress,
        credits_required=baseline,
        courses_done=sum(1 for c in best.values() if c.status in COUNTS_AS_DONE),
        total_courses=len(best),
    )

    seen_messages = set()
    for program_audit in result.programs:
        for warning in program_audit.warnings:
            if warning.message not in seen_messages:
                seen_messages.add(warning.message)
                result.warnings.append(warning)

    result.unassigned_courses = _unassigned_courses(transcript, best)
    logger.debug(
        "Audit for student %s: %s%% of %s credits", student_id, result.combined.percent_complete, baseline
    )
    return result


def _unassigned_courses(transcript: list[TranscriptRecord], best: dict[int, CourseAuditStatus]) -> list[UnassignedCourse]:
    unassigned: dict[int, UnassignedCourse] = {}
    for record in transcript:
        if record.course_id in best:
            continue
        candidate = UnassignedCourse(
            course_id=record.course_id,
            code=record.course.code,
            title=record.course.title,
            credits=record.course.credits,
            status=record_status(record),
            grade=record.grade,
            semester=str(record.semester) if record.semester_id else "",
        )
        current = unassigned.get(record.course_id)
        if current is None or is_better(candidate, current):
            unassigned[record.course_id] = candidate
    return list(unassigned.values())
