import pytest

from planner.autofill import (
    FILL_ALL,
    apply_autofill_suggestions,
    generate_autofill_suggestions,
    slot_kind,
)
from planner.errors import NotFoundError
from planner.lifecycle import add_course_to_plan
from planner.models import PlanEntry, Program, RecommendedSequenceEntry, TranscriptRecord

pytestmark = pytest.mark.django_db


def codes(plan):
    return [(s.course_code, s.suggested_semester) for s in plan.additions]


@pytest.fixture
def catalog(make_course, add_prerequisite):
    courses = {code: make_course(code) for code in ("CS101", "CS201", "CS301", "CS350", "MTH201", "MTH301")}
    add_prerequisite(courses["CS201"], courses["CS101"])
    add_prerequisite(courses["CS301"], courses["CS201"])
    add_prerequisite(courses["MTH301"], courses["MTH201"])
    return courses


@pytest.fixture
def major(student, catalog, make_program, make_group, assign):
    program = make_program("BS-CS", total=24, name="Computer Science")
    make_group(program, "Core", mandatory=[catalog["CS101"], catalog["CS201"], catalog["CS301"]], sort_order=1)
    make_group(program, "Math", mandatory=[catalog["MTH201"]], sort_order=2)
    electives = make_group(program, "Major Electives", electives=[catalog["CS350"]], sort_order=3)
    minor_slot = make_group(program, "Minor Requirement", sort_order=4)
    sequence = [
        (1, catalog["CS101"], None),
        (1, catalog["MTH201"], None),
        (2, catalog["CS201"], None),
        (3, catalog["CS301"], None),
        (3, None, minor_slot),
        (3, None, electives),
    ]
    for order, (semester_number, course, group) in enumerate(sequence):
        RecommendedSequenceEntry.objects.create(
            program=program,
            semester_number=semester_number,
            recommended_order=order,
            course=course,
            requirement_group=group,
        )
    assign(student, program, is_primary=True)
    return program


@pytest.fixture
def minor(student, catalog, make_program, make_group, assign):
    program = make_program("MIN-MTH", Program.MINOR, total=6, name="Mathematics")
    make_group(program, "Minor Core", credits=6, mandatory=[catalog["MTH201"], catalog["MTH301"]])
    assign(student, program)
    return program


def test_slot_kind():
    assert slot_kind("Minor Requirement") == Program.MINOR
    assert slot_kind("Concentration Elective") == Program.CONCENTRATION
    assert slot_kind("Major Electives") is None


class TestSequencePass:
    def test_follows_sequence_and_accumulates_prerequisites(self, student, draft, major):
        plan = generate_autofill_suggestions(student.pk, draft.pk, FILL_ALL)
        assert plan.major_name == "Computer Science"
        assert plan.minor_name is None
        assert codes(plan) == [("CS101", 1), ("MTH201", 1), ("CS201", 2), ("CS301", 3)]
        assert all(s.prereqs_met for s in plan.additions)
        assert {s.category for s in plan.additions} == {"Major Core"}
        assert [(c.course_code, c.reason) for c in plan.conflicts] == [
            ("Minor Requirement Slot", "No minor selected"),
            ("Major Electives Slot", "Manual selection recommended for elective slots"),
        ]

    def test_minor_slot_takes_first_unmet_minor_course(self, student, draft, major, minor):
        plan = generate_autofill_suggestions(student.pk, draft.pk, FILL_ALL)
        minor_picks = [s for s in plan.additions if s.category == "Minor (Mathematics)"]
        assert [(s.course_code, s.suggested_semester, s.prereqs_met) for s in minor_picks] == [("MTH301", 3, True)]
        assert plan.minor_name == "Mathematics"
        assert [c.course_code for c in plan.conflicts] == ["Major Electives Slot"]

    def test_concentration_slot_routes_to_assigned_concentration(
        self, student, draft, major, make_course, make_program, make_group, assign
    ):
        slot = make_group(major, "Concentration Elective", sort_order=6)
        RecommendedSequenceEntry.objects.create(
            program=major, semester_number=2, recommended_order=9, requirement_group=slot
        )
        concentration = make_program("CON-AI", Program.CONCENTRATION, total=6, name="AI", parent_program=major)
        make_group(concentration, "AI Core", credits=6, mandatory=[make_course("AI400"), make_course("AI410")])
        assign(student, concentration)

        plan = generate_autofill_suggestions(student.pk, draft.pk, FILL_ALL)
        picks = [
            (s.course_code, s.suggested_semester, s.category)
            for s in plan.additions
            if s.category.startswith("Concentration")
        ]
        assert picks == [("AI400", 2, "Concentration (AI)")]
        assert plan.concentration_name == "AI"
        assert "Concentration Elective Slot" not in [c.course_code for c in plan.conflicts]

    def test_transcript_courses_are_never_proposed(self, student, draft, major, catalog, record):
        record(student, catalog["CS101"], grade="A")
        record(student, catalog["MTH201"], status=TranscriptRecord.FAILED, grade="F")
        plan = generate_autofill_suggestions(student.pk, draft.pk, FILL_ALL)
        assert codes(plan) == [("CS201", 2), ("CS301", 3)]
        assert plan.additions[0].prereqs_met is True

    def test_planned_courses_are_never_proposed(self, student, draft, major, catalog):
        add_course_to_plan(student.pk, draft.pk, catalog["CS201"].pk, 2)
        plan = generate_autofill_suggestions(student.pk, draft.pk, FILL_ALL)
        assert "CS201" not in [code for code, _ in codes(plan)]

    def test_remaining_mode_skips_elapsed_semesters(self, student, draft, major, catalog, make_course, record, term):
        record(student, make_course("ENG101"), semester=term("FALL", 2025))
        record(student, make_course("ART100"), semester=term("SPRING", 2026))
        plan = generate_autofill_suggestions(student.pk, draft.pk)
        assert codes(plan) == [("CS301", 3)]
        assert plan.additions[0].missing_prereqs == ["CS201"]

        everything = generate_autofill_suggestions(student.pk, draft.pk, FILL_ALL)
        assert codes(everything) == [("CS101", 3), ("MTH201", 3), ("CS201", 3), ("CS301", 3)]
        # merged into one term, a course cannot count on a prerequisite proposed alongside it
        assert [(s.course_code, s.prereqs_met) for s in everything.additions] == [
            ("CS101", True),
            ("MTH201", True),
            ("CS201", False),
            ("CS301", False),
        ]
        assert everything.additions[2].missing_prereqs == ["CS101"]

    def test_unknown_mode_falls_back_to_remaining(self, student, draft, major):
        plan = generate_autofill_suggestions(student.pk, draft.pk, "everything")
        assert len(plan.additions) == 4


class TestGapPass:
    def test_tops_up_groups_with_credit_requirements(self, student, draft, major, make_course, make_group):
        systems = [make_course(code) for code in ("CS310", "CS320", "CS330")]
        make_group(major, "Systems", credits=6, electives=systems, sort_order=5)
        plan = generate_autofill_suggestions(student.pk, draft.pk, FILL_ALL)
        gap = [(s.course_code, s.suggested_semester, s.category) for s in plan.additions if s.category == "Systems"]
        assert gap == [("CS310", 1, "Systems"), ("CS320", 1, "Systems")]

    def test_minor_groups_are_topped_up(self, student, draft, major, minor, catalog, record):
        record(student, catalog["MTH301"], grade="A")
        plan = generate_autofill_suggestions(student.pk, draft.pk, FILL_ALL)
        # MTH201 is already proposed by the sequence, MTH301 is taken
        assert not [s for s in plan.additions if s.category.startswith("Minor:")]


class TestFailures:
    def test_no_major(self, student, draft):
        with pytest.raises(NotFoundError):
            generate_autofill_suggestions(student.pk, draft.pk)

    def test_unknown_draft(self, student, major):
        with pytest.raises(NotFoundError):
            generate_autofill_suggestions(student.pk, 999999)


def test_apply_adds_suggestions_once(student, draft, major):
    plan = generate_autofill_suggestions(student.pk, draft.pk, FILL_ALL)
    results = apply_autofill_suggestions(student.pk, draft.pk, plan.additions)
    assert all(result.success for result in results)
    planned = PlanEntry.objects.filter(draft=draft).order_by("semester_number", "semester_order")
    assert [(e.course.code, e.semester_number) for e in planned] == codes(plan)

    again = generate_autofill_suggestions(student.pk, draft.pk, FILL_ALL)
    assert again.additions == []
    duplicate = apply_autofill_suggestions(student.pk, draft.pk, [{"course_id": plan.additions[0].course_id, "suggested_semester": 1}])
    assert duplicate[0].kind == "integrity_violation"
