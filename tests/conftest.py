from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from planner.drafts import get_default_draft
from planner.models import (
    Course,
    CourseDependency,
    Program,
    RequirementGroup,
    RequirementGroupCourse,
    Semester,
    StudentProfile,
    StudentProgram,
    TranscriptRecord,
)

User = get_user_model()


@pytest.fixture
def advisor(db):
    return User.objects.create_user(username="advisor", password="pass12345")


@pytest.fixture
def other_advisor(db):
    return User.objects.create_user(username="other-advisor", password="pass12345")


@pytest.fixture
def student(db, advisor):
    user = User.objects.create_user(username="student", password="pass12345")
    StudentProfile.objects.create(user=user, advisor=advisor, enrollment_year=2025, student_number="S1")
    return user


@pytest.fixture
def draft(student):
    return get_default_draft(student.pk)


@pytest.fixture
def make_course(db):
    def factory(code, credits=3, title=None, **extra):
        return Course.objects.create(code=code, title=title or f"Course {code}", credits=Decimal(credits), **extra)

    return factory


@pytest.fixture
def add_prerequisite(db):
    def factory(course, required, logic_set_id=1):
        return CourseDependency.objects.create(
            course=course, dependency_course=required, logic_set_id=logic_set_id, kind=CourseDependency.PREREQUISITE
        )

    return factory


@pytest.fixture
def make_program(db):
    def factory(code, program_type=Program.MAJOR, total=12, name=None, **extra):
        return Program.objects.create(
            code=code,
            name=name or code,
            program_type=program_type,
            total_credits_required=Decimal(total),
            **extra,
        )

    return factory


@pytest.fixture
def make_group(db):
    def factory(program, name, credits=None, parent=None, mandatory=(), electives=(), sort_order=0):
        group = RequirementGroup.objects.create(
            program=program,
            name=name,
            credits_required=None if credits is None else Decimal(credits),
            parent=parent,
            sort_order=sort_order,
        )
        for course in mandatory:
            RequirementGroupCourse.objects.create(group=group, course=course, is_mandatory=True)
        for course in electives:
            RequirementGroupCourse.objects.create(group=group, course=course, is_mandatory=False)
        return group

    return factory


@pytest.fixture
def assign(db):
    def factory(user, program, is_primary=False):
        return StudentProgram.objects.create(student=user, program=program, is_primary=is_primary)

    return factory


@pytest.fixture
def record(db):
    def factory(user, course, status=TranscriptRecord.COMPLETED, grade="A", semester=None):
        return TranscriptRecord.objects.create(
            student=user, course=course, status=status, grade=grade, semester=semester
        )

    return factory


@pytest.fixture
def term(db):
    def factory(term, year):
        return Semester.objects.get_or_create(term=term, year=year)[0]

    return factory
