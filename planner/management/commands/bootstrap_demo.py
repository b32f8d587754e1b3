"""Create a small catalog, programs and one advised student for quick walkthroughs."""
from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from planner.models import (
    Course,
    CourseDependency,
    Program,
    RecommendedSequenceEntry,
    RequirementGroup,
    RequirementGroupCourse,
    Semester,
    StudentProfile,
    StudentProgram,
    TranscriptRecord,
)

User = get_user_model()

COURSES = [
    ("CS101", "Introduction to Programming", 3),
    ("CS201", "Data Structures", 3),
    ("CS220", "Computer Organization", 3),
    ("CS301", "Algorithms", 3),
    ("CS310", "Operating Systems", 3),
    ("CS350", "Databases", 3),
    ("CS360", "Machine Learning", 3),
    ("CS370", "Data Visualization", 3),
    ("MTH150A", "Precalculus I", 2),
    ("MTH150B", "Precalculus II", 2),
    ("MTH201", "Calculus I", 4),
    ("MTH210", "Discrete Mathematics", 3),
    ("MTH301", "Linear Algebra", 3),
    ("MTH320", "Probability", 3),
    ("ENG101", "Academic Writing", 3),
]

# (course, [(logic set, required course), ...])
PREREQUISITES = [
    ("CS201", [(1, "CS101")]),
    ("CS220", [(1, "CS101")]),
    ("CS301", [(1, "CS201"), (1, "MTH210")]),
    ("CS310", [(1, "CS220"), (1, "CS201")]),
    ("CS350", [(1, "CS201")]),
    ("CS360", [(1, "CS301"), (1, "MTH301")]),
    ("MTH301", [(1, "MTH201"), (2, "MTH150A"), (2, "MTH150B")]),
    ("MTH320", [(1, "MTH201")]),
]


class Command(BaseCommand):
    help = "Seed a small catalog, a major with a minor and concentration, and one advised student"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Creating planner demo data..."))

        courses = {}
        for code, title, credits in COURSES:
            courses[code], _ = Course.objects.get_or_create(
                code=code, defaults={"title": title, "credits": Decimal(credits)}
            )
        for code, requirements in PREREQUISITES:
            for logic_set_id, required in requirements:
                CourseDependency.objects.get_or_create(
                    course=courses[code],
                    dependency_course=courses[required],
                    logic_set_id=logic_set_id,
                    defaults={"kind": CourseDependency.PREREQUISITE},
                )
        CourseDependency.objects.get_or_create(
            course=courses["CS360"],
            kind=CourseDependency.STATUS,
            defaults={"required_status": "Junior standing"},
        )

        major, _ = Program.objects.get_or_create(
            code="BS-CS",
            defaults={"name": "Computer Science", "program_type": Program.MAJOR, "total_credits_required": Decimal(36)},
        )
        minor, _ = Program.objects.get_or_create(
            code="MIN-MTH",
            defaults={"name": "Mathematics", "program_type": Program.MINOR, "total_credits_required": Decimal(12)},
        )
        concentration, _ = Program.objects.get_or_create(
            code="CON-DS",
            defaults={
                "name": "Data Science",
                "program_type": Program.CONCENTRATION,
                "total_credits_required": Decimal(6),
                "parent_program": major,
            },
        )

        def group(program, name, credits=None, parent=None, order=0, mandatory=(), electives=()):
            instance, _ = RequirementGroup.objects.get_or_create(
                program=program,
                name=name,
                defaults={"credits_required": credits, "parent": parent, "sort_order": order},
            )
            for code in mandatory:
                RequirementGroupCourse.objects.get_or_create(group=instance, course=courses[code], defaults={"is_mandatory": True})
            for code in electives:
                RequirementGroupCourse.objects.get_or_create(group=instance, course=courses[code], defaults={"is_mandatory": False})
            return instance

        core = group(major, "Computer Science Core", Decimal(15), order=1, mandatory=["CS101", "CS201", "CS301"])
        group(major, "Systems", Decimal(6), parent=core, order=2, mandatory=["CS220", "CS310"])
        group(major, "Mathematics Foundation", Decimal(7), order=3, mandatory=["MTH201", "MTH210"])
        electives = group(major, "Major Electives", order=4, electives=["CS350", "CS370"])
        minor_slot = group(major, "Minor Requirement", order=5)
        group(major, "General Education", Decimal(3), order=6, mandatory=["ENG101"])
        group(minor, "Minor Core", Decimal(12), order=1, mandatory=["MTH201", "MTH210", "MTH301"], electives=["MTH320"])
        group(concentration, "Data Science Courses", Decimal(6), order=1, mandatory=["CS360"], electives=["CS370"])

        sequence = [
            (1, "CS101", None),
            (1, "MTH201", None),
            (1, "ENG101", None),
            (2, "CS201", None),
            (2, "MTH210", None),
            (3, "CS220", None),
            (3, "CS301", None),
            (3, None, minor_slot),
            (4, "CS310", None),
            (4, None, electives),
            (5, None, minor_slot),
        ]
        for order, (semester_number, code, slot) in enumerate(sequence, start=1):
            RecommendedSequenceEntry.objects.get_or_create(
                program=major,
                semester_number=semester_number,
                recommended_order=order,
                defaults={"course": courses[code] if code else None, "requirement_group": slot},
            )

        admin_user, created_admin = User.objects.get_or_create(username="admin", defaults={"email": "admin@example.com"})
        if created_admin:
            admin_user.is_staff = True
            admin_user.is_superuser = True
            admin_user.set_password("admin123")
            admin_user.save()

        advisor, created_advisor = User.objects.get_or_create(
            username="advisor", defaults={"first_name": "Carol", "email": "advisor@example.com"}
        )
        student, created_student = User.objects.get_or_create(
            username="student", defaults={"first_name": "Alice", "email": "student@example.com"}
        )
        for user, created in ((advisor, created_advisor), (student, created_student)):
            if created:
                user.set_password("planner123")
                user.save(update_fields=["password"])

        # transcript first so the default draft locks the terms already taken
        fall, _ = Semester.objects.get_or_create(term="FALL", year=2025, defaults={"name": "Fall 2025"})
        spring, _ = Semester.objects.get_or_create(term="SPRING", year=2026, defaults={"name": "Spring 2026"})
        transcript = [
            ("CS101", fall, "A", TranscriptRecord.COMPLETED),
            ("MTH150A", fall, "B+", TranscriptRecord.COMPLETED),
            ("ENG101", fall, "F", TranscriptRecord.FAILED),
            ("CS201", spring, "", TranscriptRecord.IN_PROGRESS),
            ("MTH150B", spring, "", TranscriptRecord.IN_PROGRESS),
        ]
        for code, term, grade, status in transcript:
            TranscriptRecord.objects.get_or_create(
                student=student,
                course=courses[code],
                semester=term,
                defaults={"grade": grade, "status": status},
            )

        StudentProfile.objects.get_or_create(
            user=student,
            defaults={"advisor": advisor, "enrollment_year": 2025, "student_number": "S2025001"},
        )
        StudentProgram.objects.get_or_create(student=student, program=major, defaults={"is_primary": True})
        StudentProgram.objects.get_or_create(student=student, program=minor)

        self.stdout.write(
            self.style.SUCCESS("Planner demo data ready. Log in as student/planner123 or advisor/planner123.")
        )
