# Generated manually for initial Django models
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion

TERM_CHOICES = [("FALL", "Fall"), ("SPRING", "Spring"), ("SUMMER", "Summer")]
PROGRAM_TYPE_CHOICES = [("MAJOR", "Major"), ("MINOR", "Minor"), ("CONCENTRATION", "Concentration")]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Course",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=20, unique=True, verbose_name="Course code")),
                ("title", models.CharField(max_length=255, verbose_name="Title")),
                ("credits", models.DecimalField(decimal_places=1, max_digits=4, verbose_name="Credits")),
                ("is_active", models.BooleanField(default=True, verbose_name="Offered")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
            ],
            options={
                "verbose_name": "Course",
                "verbose_name_plural": "Courses",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="Program",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=20, unique=True, verbose_name="Program code")),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                (
                    "program_type",
                    models.CharField(choices=PROGRAM_TYPE_CHOICES, max_length=20, verbose_name="Program type"),
                ),
                (
                    "total_credits_required",
                    models.DecimalField(decimal_places=1, default=0, max_digits=5, verbose_name="Total credits required"),
                ),
                (
                    "parent_program",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="concentrations",
                        to="planner.program",
                        verbose_name="Parent major",
                    ),
                ),
            ],
            options={
                "verbose_name": "Program",
                "verbose_name_plural": "Programs",
                "ordering": ["program_type", "name"],
            },
        ),
        migrations.CreateModel(
            name="Semester",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("term", models.CharField(choices=TERM_CHOICES, max_length=10, verbose_name="Term")),
                ("year", models.PositiveSmallIntegerField(verbose_name="Year")),
                ("name", models.CharField(blank=True, max_length=50, verbose_name="Name")),
            ],
            options={
                "verbose_name": "Academic term",
                "verbose_name_plural": "Academic terms",
                "ordering": ["year", "id"],
                "unique_together": {("term", "year")},
            },
        ),
        migrations.CreateModel(
            name="CourseDependency",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("PREREQUISITE", "Prerequisite"),
                            ("COREQUISITE", "Corequisite"),
                            ("STATUS", "Standing requirement"),
                        ],
                        default="PREREQUISITE",
                        max_length=20,
                        verbose_name="Kind",
                    ),
                ),
                ("logic_set_id", models.PositiveSmallIntegerField(default=1, verbose_name="Logic set")),
                ("required_status", models.CharField(blank=True, max_length=50, verbose_name="Required standing")),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="dependencies",
                        to="planner.course",
                        verbose_name="Course",
                    ),
                ),
                (
                    "dependency_course",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="required_for",
                        to="planner.course",
                        verbose_name="Required course",
                    ),
                ),
            ],
            options={
                "verbose_name": "Course dependency",
                "verbose_name_plural": "Course dependencies",
                "ordering": ["course__code", "logic_set_id", "id"],
            },
        ),
        migrations.CreateModel(
            name="RequirementGroup",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                (
                    "credits_required",
                    models.DecimalField(blank=True, decimal_places=1, max_digits=5, null=True, verbose_name="Credits required"),
                ),
                (
                    "min_courses_required",
                    models.PositiveSmallIntegerField(blank=True, null=True, verbose_name="Minimum courses"),
                ),
                ("sort_order", models.PositiveSmallIntegerField(default=0, verbose_name="Display order")),
                (
                    "program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="requirement_groups",
                        to="planner.program",
                        verbose_name="Program",
                    ),
                ),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="children",
                        to="planner.requirementgroup",
                        verbose_name="Parent group",
                    ),
                ),
            ],
            options={
                "verbose_name": "Requirement group",
                "verbose_name_plural": "Requirement groups",
                "ordering": ["program__code", "sort_order", "id"],
            },
        ),
        migrations.CreateModel(
            name="RequirementGroupCourse",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("is_mandatory", models.BooleanField(default=True, verbose_name="Mandatory")),
                (
                    "group",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="group_courses",
                        to="planner.requirementgroup",
                        verbose_name="Group",
                    ),
                ),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="requirement_links",
                        to="planner.course",
                        verbose_name="Course",
                    ),
                ),
            ],
            options={
                "verbose_name": "Requirement course",
                "verbose_name_plural": "Requirement courses",
                "ordering": ["group", "-is_mandatory", "course__code"],
                "unique_together": {("group", "course")},
            },
        ),
        migrations.CreateModel(
            name="RecommendedSequenceEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("semester_number", models.PositiveSmallIntegerField(verbose_name="Recommended semester")),
                ("recommended_order", models.PositiveSmallIntegerField(default=0, verbose_name="Order within semester")),
                ("notes", models.CharField(blank=True, max_length=255, verbose_name="Notes")),
                (
                    "program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sequence_entries",
                        to="planner.program",
                        verbose_name="Program",
                    ),
                ),
                (
                    "course",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sequence_entries",
                        to="planner.course",
                        verbose_name="Course",
                    ),
                ),
                (
                    "requirement_group",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sequence_entries",
                        to="planner.requirementgroup",
                        verbose_name="Requirement group",
                    ),
                ),
            ],
            options={
                "verbose_name": "Recommended sequence entry",
                "verbose_name_plural": "Recommended sequence",
                "ordering": ["program__code", "semester_number", "recommended_order", "id"],
            },
        ),
        migrations.CreateModel(
            name="StudentProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("enrollment_year", models.PositiveSmallIntegerField(verbose_name="Enrollment year")),
                (
                    "student_number",
                    models.CharField(blank=True, max_length=32, null=True, unique=True, verbose_name="Student number"),
                ),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="student_profile",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Account",
                    ),
                ),
                (
                    "advisor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="advisees",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Advisor",
                    ),
                ),
            ],
            options={
                "verbose_name": "Student",
                "verbose_name_plural": "Students",
                "ordering": ["student_number", "user__username"],
            },
        ),
        migrations.CreateModel(
            name="StudentProgram",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "program_type",
                    models.CharField(blank=True, choices=PROGRAM_TYPE_CHOICES, max_length=20, verbose_name="Program type"),
                ),
                ("is_primary", models.BooleanField(default=False, verbose_name="Primary")),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="program_assignments",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Student",
                    ),
                ),
                (
                    "program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="assignments",
                        to="planner.program",
                        verbose_name="Program",
                    ),
                ),
            ],
            options={
                "verbose_name": "Program assignment",
                "verbose_name_plural": "Program assignments",
                "ordering": ["-is_primary", "id"],
                "unique_together": {("student", "program")},
            },
        ),
        migrations.CreateModel(
            name="TranscriptRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("grade", models.CharField(blank=True, max_length=5, verbose_name="Grade")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("COMPLETED", "Completed"),
                            ("IN_PROGRESS", "In progress"),
                            ("TRANSFER", "Transfer credit"),
                            ("FAILED", "Failed"),
                        ],
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="transcript_records",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Student",
                    ),
                ),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transcript_records",
                        to="planner.course",
                        verbose_name="Course",
                    ),
                ),
                (
                    "semester",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transcript_records",
                        to="planner.semester",
                        verbose_name="Term",
                    ),
                ),
            ],
            options={
                "verbose_name": "Transcript record",
                "verbose_name_plural": "Transcript records",
                "ordering": ["student", "semester__year", "course__code"],
            },
        ),
        migrations.CreateModel(
            name="PlanDraft",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                ("is_default", models.BooleanField(default=False, verbose_name="Default")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="plan_drafts",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Student",
                    ),
                ),
            ],
            options={
                "verbose_name": "Plan draft",
                "verbose_name_plural": "Plan drafts",
                "ordering": ["student", "-is_default", "name"],
                "unique_together": {("student", "name")},
            },
        ),
        migrations.CreateModel(
            name="PlanSemester",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("semester_number", models.PositiveSmallIntegerField(verbose_name="Semester number")),
                ("term", models.CharField(choices=TERM_CHOICES, max_length=10, verbose_name="Term")),
                ("year", models.PositiveSmallIntegerField(verbose_name="Year")),
                ("is_locked", models.BooleanField(default=False, verbose_name="Locked")),
                (
                    "draft",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="semesters",
                        to="planner.plandraft",
                        verbose_name="Draft",
                    ),
                ),
            ],
            options={
                "verbose_name": "Plan semester",
                "verbose_name_plural": "Plan semesters",
                "ordering": ["draft", "semester_number"],
                "unique_together": {("draft", "semester_number")},
            },
        ),
        migrations.CreateModel(
            name="PlanEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("semester_number", models.PositiveSmallIntegerField(verbose_name="Semester number")),
                ("semester_order", models.PositiveIntegerField(default=0, verbose_name="Order within semester")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("DRAFT", "Draft"),
                            ("SUBMITTED", "Submitted"),
                            ("APPROVED", "Approved"),
                            ("REJECTED", "Rejected"),
                        ],
                        default="DRAFT",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("prereqs_met", models.BooleanField(default=False, verbose_name="Prerequisites met")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="plan_entries",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Student",
                    ),
                ),
                (
                    "draft",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="entries",
                        to="planner.plandraft",
                        verbose_name="Draft",
                    ),
                ),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="plan_entries",
                        to="planner.course",
                        verbose_name="Course",
                    ),
                ),
            ],
            options={
                "verbose_name": "Planned course",
                "verbose_name_plural": "Planned courses",
                "ordering": ["draft", "semester_number", "semester_order", "id"],
                "unique_together": {("draft", "course")},
            },
        ),
        migrations.CreateModel(
            name="SemesterApproval",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending review"),
                            ("APPROVED", "Approved"),
                            ("NEEDS_REVISION", "Needs revision"),
                        ],
                        default="PENDING",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("comments", models.TextField(blank=True, verbose_name="Advisor comments")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="semester_approvals",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Student",
                    ),
                ),
                (
                    "semester",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="approvals",
                        to="planner.semester",
                        verbose_name="Term",
                    ),
                ),
                (
                    "draft",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="approvals",
                        to="planner.plandraft",
                        verbose_name="Submitted draft",
                    ),
                ),
                (
                    "advisor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="semester_reviews",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Advisor",
                    ),
                ),
            ],
            options={
                "verbose_name": "Semester approval",
                "verbose_name_plural": "Semester approvals",
                "ordering": ["-updated_at"],
                "unique_together": {("student", "semester")},
            },
        ),
        migrations.CreateModel(
            name="CourseOverride",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "override_type",
                    models.CharField(
                        choices=[("WAIVER", "Waiver"), ("SUBSTITUTION", "Substitution")],
                        max_length=20,
                        verbose_name="Override type",
                    ),
                ),
                ("rationale", models.TextField(verbose_name="Rationale")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="course_overrides",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Student",
                    ),
                ),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="overrides",
                        to="planner.course",
                        verbose_name="Requirement course",
                    ),
                ),
                (
                    "substitute_course",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="substitutions",
                        to="planner.course",
                        verbose_name="Substitute course",
                    ),
                ),
                (
                    "advisor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="granted_overrides",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Granted by",
                    ),
                ),
            ],
            options={
                "verbose_name": "Course override",
                "verbose_name_plural": "Course overrides",
                "ordering": ["-created_at"],
                "unique_together": {("student", "course")},
            },
        ),
        migrations.CreateModel(
            name="PlanReviewLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("semester_number", models.PositiveSmallIntegerField(verbose_name="Semester number")),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("submitted", "Submitted"),
                            ("approved", "Approved"),
                            ("rejected", "Sent back"),
                            ("revised", "Revised"),
                        ],
                        max_length=16,
                        verbose_name="Action",
                    ),
                ),
                ("comments", models.TextField(blank=True, verbose_name="Comments")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Time")),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="plan_review_logs",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Student",
                    ),
                ),
                (
                    "draft",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="review_logs",
                        to="planner.plandraft",
                        verbose_name="Draft",
                    ),
                ),
                (
                    "actor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="plan_review_actions",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Performed by",
                    ),
                ),
            ],
            options={
                "verbose_name": "Plan review log",
                "verbose_name_plural": "Plan review logs",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
