"""Auto-fill: propose unmet courses per future semester from a program's recommended sequence."""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from decimal import Decimal

from .drafts import historical_semester_count
from .errors import ActionResult, NotFoundError
from .lifecycle import add_course_to_plan
from .models import (
    Course,
    PlanDraft,
    PlanEntry,
    Program,
    RecommendedSequenceEntry,
    RequirementGroup,
    RequirementGroupCourse,
    StudentProgram,
    TranscriptRecord,
)
from .prerequisites import PrerequisiteResolver, plan_completed_ids

logger = logging.getLogger(__name__)

FILL_REMAINING = "remaining"
FILL_ALL = "all"
FILL_MODES = (FILL_REMAINING, FILL_ALL)


@dataclass
class Suggestion:
    course_id: int
    course_code: str
    title: str
    credits: Decimal
    suggested_semester: int
    prereqs_met: bool
    missing_prereqs: list[str]
    category: str


@dataclass
class Conflict:
    course_code: str
    reason: str


@dataclass
class AutoFillPlan:
    additions: list[Suggestion] = field(default_factory=list)
    conflicts: list[Conflict] = field(default_factory=list)
    major_name: str = ""
    minor_name: str | None = None
    concentration_name: str | None = None

    def as_dict(self) -> dict:
        return asdict(self)


def slot_kind(group_name: str) -> str | None:
    """Which assigned program a sequence slot draws from, judged by the group's name."""

    name = group_name.lower()
    if "minor" in name:
        return Program.MINOR
    if "concentration" in name:
        return Program.CONCENTRATION
    return None


def _is_gap_placeholder(group: RequirementGroup) -> bool:
    name = group.name.lower()
    if "minor" in name or "concentration" in name or "general education" in name:
        return True
    return "elective" in name and not group.credits_required


def _program_courses(program: Program) -> list[Course]:
    """Active courses of every group in the program, mandatory first, then by code."""

    links = (
        RequirementGroupCourse.objects.filter(group__program=program, course__is_active=True)
        .select_related("course")
        .order_by("-is_mandatory", "course__code")
    )
    courses, seen = [], set()
    for link in links:
        if link.course_id not in seen:
            seen.add(link.course_id)
            courses.append(link.course)
    return courses


def _top_level_groups(program: Program) -> list[tuple[RequirementGroup, list[Course]]]:
    """Each top-level group with the active courses of it and all of its sub-groups."""

    groups = list(RequirementGroup.objects.filter(program=program).order_by("sort_order", "id"))
    children = defaultdict(list)
    for group in groups:
        if group.parent_id is not None:
            children[group.parent_id].append(group.pk)
    links_by_group = defaultdict(list)
    for link in (
        RequirementGroupCourse.objects.filter(group__program=program, course__is_active=True)
        .select_related("course")
        .order_by("-is_mandatory", "course__code")
    ):
        links_by_group[link.group_id].append(link)

    result = []
    for group in groups:
        if group.parent_id is not None:
            continue
        member_ids, pending = [], [group.pk]
        while pending:
            current = pending.pop(0)
            if current in member_ids:
                continue
            member_ids.append(current)
            pending.extend(children[current])
        links = [link for member in member_ids for link in links_by_group[member]]
        links.sort(key=lambda link: (not link.is_mandatory, link.course.code))
        courses, seen = [], set()
        for link in links:
            if link.course_id not in seen:
                seen.add(link.course_id)
                courses.append(link.course)
        result.append((group, courses))
    return result


class AutoFillBuilder:
    """Collects suggestions while tracking what is taken, planned and already proposed."""

    def __init__(self, student_id: int, draft: PlanDraft | None, fill_mode: str):
        self.student_id = student_id
        self.fill_mode = fill_mode
        self.plan = AutoFillPlan()
        self.taken = plan_completed_ids(student_id)
        transcript_ids = set(
            TranscriptRecord.objects.filter(student_id=student_id).values_list("course_id", flat=True)
        )
        planned_ids = set()
        if draft is not None:
            planned_ids = set(PlanEntry.objects.filter(draft=draft).values_list("course_id", flat=True))
        self.fulfilled = self.taken | planned_ids
        self.skip = transcript_ids | planned_ids
        self.added: dict[int, Suggestion] = {}
        self.will_be_completed = set(self.taken)
        self.resolver = PrerequisiteResolver()
        self.historical = historical_semester_count(student_id)

    @property
    def first_open_semester(self) -> int:
        """Draft semesters are numbered from enrollment; the ones already on the transcript come first."""
        return self.historical + 1

    def suggest(self, course: Course, semester: int, category: str) -> Suggestion | None:
        if course.pk in self.skip or course.pk in self.added:
            return None
        check = self.resolver.check(course.pk, self.will_be_completed)
        suggestion = Suggestion(
            course_id=course.pk,
            course_code=course.code,
            title=course.title,
            credits=course.credits,
            suggested_semester=semester,
            prereqs_met=check.satisfied,
            missing_prereqs=check.missing,
            category=category,
        )
        self.added[course.pk] = suggestion
        self.plan.additions.append(suggestion)
        return suggestion

    def sequence_pass(self, major: Program, programs: dict[str, Program | None]) -> None:
        entries = (
            RecommendedSequenceEntry.objects.filter(program=major)
            .select_related("course", "requirement_group")
            .order_by("semester_number", "recommended_order", "id")
        )
        by_semester = defaultdict(list)
        for entry in entries:
            by_semester[entry.semester_number].append(entry)
        self.resolver.load(entry.course_id for entry in entries if entry.course_id)
        slot_courses: dict[str, list[Course]] = {}
        current_target, proposed = None, []

        for semester_number in sorted(by_semester):
            if self.fill_mode == FILL_REMAINING and semester_number <= self.historical:
                continue
            # elapsed semesters are pulled forward into the first open one
            target = max(self.first_open_semester, semester_number)
            if target != current_target:
                # later semesters may assume earlier proposals are passed, the same one may not
                self.will_be_completed.update(s.course_id for s in proposed if s is not None)
                current_target, proposed = target, []
            for entry in by_semester[semester_number]:
                if entry.course_id:
                    if entry.course.is_active:
                        proposed.append(self.suggest(entry.course, target, "Major Core"))
                    continue
                group_name = entry.requirement_group.name
                kind = slot_kind(group_name)
                if kind is None:
                    self.plan.conflicts.append(
                        Conflict(f"{group_name} Slot", "Manual selection recommended for elective slots")
                    )
                    continue
                program = programs.get(kind)
                label = "Minor" if kind == Program.MINOR else "Concentration"
                if program is None:
                    self.plan.conflicts.append(
                        Conflict(f"{group_name} Slot", f"No {label.lower()} selected")
                    )
                    continue
                if kind not in slot_courses:
                    slot_courses[kind] = _program_courses(program)
                    self.resolver.load(course.pk for course in slot_courses[kind])
                for course in slot_courses[kind]:
                    suggestion = self.suggest(course, target, f"{label} ({program.name})")
                    if suggestion is not None:
                        proposed.append(suggestion)
                        break
        self.will_be_completed.update(s.course_id for s in proposed if s is not None)

    def gap_pass(self, program: Program, category_prefix: str = "", skip_placeholders: bool = True) -> None:
        """Top up each top-level group until its credit requirement is covered."""

        for group, courses in _top_level_groups(program):
            if skip_placeholders and _is_gap_placeholder(group):
                continue
            if not group.credits_required:
                continue
            member_ids = {course.pk for course in courses}
            fulfilled = sum((c.credits for c in courses if c.pk in self.fulfilled), Decimal("0"))
            fulfilled += sum((s.credits for s in self.added.values() if s.course_id in member_ids), Decimal("0"))
            remaining = group.credits_required - fulfilled
            self.resolver.load(member_ids)
            for course in courses:
                if remaining <= 0:
                    break
                suggestion = self.suggest(course, self.first_open_semester, f"{category_prefix}{group.name}")
                if suggestion is not None:
                    remaining -= suggestion.credits


def _assigned_programs(student_id: int) -> dict[str, Program | None]:
    assignments = (
        StudentProgram.objects.filter(student_id=student_id)
        .select_related("program")
        .order_by("-is_primary", "id")
    )
    programs: dict[str, Program | None] = {
        Program.MAJOR: None,
        Program.MINOR: None,
        Program.CONCENTRATION: None,
    }
    for assignment in assignments:
        if programs.get(assignment.program.program_type) is None:
            programs[assignment.program.program_type] = assignment.program
    return programs


def _resolve_draft(student_id: int, draft_id: int | None) -> PlanDraft | None:
    if draft_id is None:
        return PlanDraft.objects.filter(student_id=student_id, is_default=True).first()
    draft = PlanDraft.objects.filter(pk=draft_id, student_id=student_id).first()
    if draft is None:
        raise NotFoundError("Plan draft not found.")
    return draft


def generate_autofill_suggestions(
    student_id: int, draft_id: int | None = None, fill_mode: str = FILL_REMAINING
) -> AutoFillPlan:
    """Propose courses for the student's remaining semesters.

    Walks the major's recommended sequence in semester order, then tops up
    under-filled major and minor requirement groups. Nothing already on the
    transcript or in the draft is proposed, and no course is proposed twice.
    """

    if fill_mode not in FILL_MODES:
        fill_mode = FILL_REMAINING
    programs = _assigned_programs(student_id)
    major = programs[Program.MAJOR]
    if major is None:
        raise NotFoundError("No major assigned. Ask your advisor to assign a major before auto-filling.")
    draft = _resolve_draft(student_id, draft_id)

    builder = AutoFillBuilder(student_id, draft, fill_mode)
    builder.plan.major_name = major.name
    minor = programs[Program.MINOR]
    concentration = programs[Program.CONCENTRATION]
    builder.plan.minor_name = minor.name if minor else None
    builder.plan.concentration_name = concentration.name if concentration else None

    builder.sequence_pass(major, programs)
    builder.gap_pass(major)
    if minor is not None:
        builder.gap_pass(minor, category_prefix="Minor: ", skip_placeholders=False)

    logger.info(
        "Auto-fill for student %s (%s): %s additions, %s conflicts",
        student_id,
        fill_mode,
        len(builder.plan.additions),
        len(builder.plan.conflicts),
    )
    return builder.plan


def apply_autofill_suggestions(student_id: int, draft_id: int, additions) -> list[ActionResult]:
    """Add each suggestion through the normal add-course path; one failure does not stop the rest."""

    results = []
    for addition in additions:
        if isinstance(addition, Suggestion):
            course_id, semester = addition.course_id, addition.suggested_semester
        else:
            course_id, semester = addition["course_id"], addition["suggested_semester"]
        results.append(add_course_to_plan(student_id, draft_id, course_id, semester))
    return results
