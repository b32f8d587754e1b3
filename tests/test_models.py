import pytest
from django.core.exceptions import ValidationError

from planner.models import (
    CourseDependency,
    CourseOverride,
    PlanDraft,
    PlanSemester,
    Program,
    RecommendedSequenceEntry,
    StudentProgram,
)

pytestmark = pytest.mark.django_db


class TestCourseDependency:
    def test_self_reference_rejected(self, make_course):
        course = make_course("CS101")
        with pytest.raises(ValidationError):
            CourseDependency.objects.create(course=course, dependency_course=course)

    def test_standing_requirement_needs_status(self, make_course):
        with pytest.raises(ValidationError):
            CourseDependency.objects.create(course=make_course("CS360"), kind=CourseDependency.STATUS)

    def test_prerequisite_needs_course(self, make_course):
        with pytest.raises(ValidationError):
            CourseDependency.objects.create(course=make_course("CS360"), kind=CourseDependency.PREREQUISITE)


class TestPrograms:
    def test_concentration_parent_must_be_major(self, make_program):
        minor = make_program("MIN", Program.MINOR)
        with pytest.raises(ValidationError):
            make_program("CON", Program.CONCENTRATION, parent_program=minor)

    def test_only_concentrations_have_parents(self, make_program):
        major = make_program("BS")
        with pytest.raises(ValidationError):
            make_program("BS2", Program.MAJOR, parent_program=major)

    def test_sub_group_must_share_program(self, make_program, make_group):
        first = make_group(make_program("BS"), "Core")
        with pytest.raises(ValidationError):
            make_group(make_program("BA"), "Nested", parent=first)

    def test_sequence_entry_references_exactly_one_target(self, make_program, make_group, make_course):
        program = make_program("BS")
        group = make_group(program, "Electives")
        course = make_course("CS101")
        with pytest.raises(ValidationError):
            RecommendedSequenceEntry.objects.create(program=program, semester_number=1)
        with pytest.raises(ValidationError):
            RecommendedSequenceEntry.objects.create(
                program=program, semester_number=1, course=course, requirement_group=group
            )
        RecommendedSequenceEntry.objects.create(program=program, semester_number=1, requirement_group=group)

    def test_assignment_type_defaults_to_program_type(self, student, make_program):
        minor = make_program("MIN", Program.MINOR)
        assignment = StudentProgram.objects.create(student=student, program=minor)
        assert assignment.program_type == Program.MINOR

    def test_assignment_type_must_match(self, student, make_program):
        with pytest.raises(ValidationError):
            StudentProgram.objects.create(student=student, program=make_program("BS"), program_type=Program.MINOR)


class TestCourseOverride:
    def test_substitution_needs_substitute(self, student, make_course):
        with pytest.raises(ValidationError):
            CourseOverride.objects.create(
                student=student,
                course=make_course("CS101"),
                override_type=CourseOverride.SUBSTITUTION,
                rationale="Took an equivalent course",
            )

    def test_waiver_cannot_name_substitute(self, student, make_course):
        with pytest.raises(ValidationError):
            CourseOverride.objects.create(
                student=student,
                course=make_course("CS101"),
                substitute_course=make_course("CS102"),
                override_type=CourseOverride.WAIVER,
                rationale="Placement exam",
            )


def test_semester_label(draft):
    semester = PlanSemester.objects.get(draft=draft, semester_number=2)
    assert semester.label == "Spring 2026"
    assert PlanDraft.objects.filter(pk=draft.pk, is_default=True).exists()
