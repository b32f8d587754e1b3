"""Django models for the course catalog, degree requirements and student plans."""
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import models

User = get_user_model()

TERM_CHOICES = [
    ("FALL", "Fall"),
    ("SPRING", "Spring"),
    ("SUMMER", "Summer"),
]


class Course(models.Model):
    code = models.CharField("Course code", max_length=20, unique=True)
    title = models.CharField("Title", max_length=255)
    credits = models.DecimalField("Credits", max_digits=4, decimal_places=1)
    is_active = models.BooleanField("Offered", default=True)
    description = models.TextField("Description", blank=True)

    class Meta:
        verbose_name = "Course"
        verbose_name_plural = "Courses"
        ordering = ["code"]

    def __str__(self) -> str:  # pragma: no cover - human readable labels
        return f"{self.code} - {self.title}"


class CourseDependency(models.Model):
    PREREQUISITE = "PREREQUISITE"
    COREQUISITE = "COREQUISITE"
    STATUS = "STATUS"
    KIND_CHOICES = [
        (PREREQUISITE, "Prerequisite"),
        (COREQUISITE, "Corequisite"),
        (STATUS, "Standing requirement"),
    ]

    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="dependencies", verbose_name="Course")
    dependency_course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="required_for",
        null=True,
        blank=True,
        verbose_name="Required course",
    )
    kind = models.CharField("Kind", max_length=20, choices=KIND_CHOICES, default=PREREQUISITE)
    logic_set_id = models.PositiveSmallIntegerField("Logic set", default=1)
    required_status = models.CharField("Required standing", max_length=50, blank=True)

    class Meta:
        verbose_name = "Course dependency"
        verbose_name_plural = "Course dependencies"
        ordering = ["course__code", "logic_set_id", "id"]

    def __str__(self) -> str:  # pragma: no cover - human readable labels
        target = self.dependency_course.code if self.dependency_course_id else self.required_status
        return f"{self.course.code} needs {target} (set {self.logic_set_id})"

    def clean(self):
        super().clean()
        if self.dependency_course_id and self.dependency_course_id == self.course_id:
            raise ValidationError("A course cannot be its own prerequisite.")
        if self.kind == self.STATUS:
            if not self.required_status:
                raise ValidationError("Standing requirements need a required standing.")
        elif not self.dependency_course_id:
            raise ValidationError("Prerequisites and corequisites need a required course.")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class Program(models.Model):
    MAJOR = "MAJOR"
    MINOR = "MINOR"
    CONCENTRATION = "CONCENTRATION"
    PROGRAM_TYPE_CHOICES = [
        (MAJOR, "Major"),
        (MINOR, "Minor"),
        (CONCENTRATION, "Concentration"),
    ]

    code = models.CharField("Program code", max_length=20, unique=True)
    name = models.CharField("Name", max_length=255)
    program_type = models.CharField("Program type", max_length=20, choices=PROGRAM_TYPE_CHOICES)
    total_credits_required = models.DecimalField("Total credits required", max_digits=5, decimal_places=1, default=0)
    parent_program = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        related_name="concentrations",
        null=True,
        blank=True,
        verbose_name="Parent major",
    )

    class Meta:
        verbose_name = "Program"
        verbose_name_plural = "Programs"
        ordering = ["program_type", "name"]

    def __str__(self) -> str:  # pragma: no cover - human readable labels
        return f"{self.name} ({self.get_program_type_display()})"

    def clean(self):
        super().clean()
        if self.parent_program_id is None:
            return
        if self.program_type != self.CONCENTRATION:
            raise ValidationError("Only concentrations can declare a parent major.")
        if self.parent_program.program_type != self.MAJOR:
            raise ValidationError("A concentration's parent program must be a major.")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class RequirementGroup(models.Model):
    program = models.ForeignKey(Program, on_delete=models.CASCADE, related_name="requirement_groups", verbose_name="Program")
    name = models.CharField("Name", max_length=255)
    credits_required = models.DecimalField("Credits required", max_digits=5, decimal_places=1, null=True, blank=True)
    min_courses_required = models.PositiveSmallIntegerField("Minimum courses", null=True, blank=True)
    parent = models.ForeignKey(
        "self",
        on_delete=models.CASCADE,
        related_name="children",
        null=True,
        blank=True,
        verbose_name="Parent group",
    )
    sort_order = models.PositiveSmallIntegerField("Display order", default=0)

    class Meta:
        verbose_name = "Requirement group"
        verbose_name_plural = "Requirement groups"
        ordering = ["program__code", "sort_order", "id"]

    def __str__(self) -> str:  # pragma: no cover - human readable labels
        return f"{self.program.code}: {self.name}"

    def clean(self):
        super().clean()
        if self.parent_id is None:
            return
        if self.pk and self.parent_id == self.pk:
            raise ValidationError("A requirement group cannot be its own parent.")
        if self.parent.program_id != self.program_id:
            raise ValidationError("A parent group must belong to the same program.")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class RequirementGroupCourse(models.Model):
    group = models.ForeignKey(RequirementGroup, on_delete=models.CASCADE, related_name="group_courses", verbose_name="Group")
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="requirement_links", verbose_name="Course")
    is_mandatory = models.BooleanField("Mandatory", default=True)

    class Meta:
        verbose_name = "Requirement course"
        verbose_name_plural = "Requirement courses"
        unique_together = [("group", "course")]
        ordering = ["group", "-is_mandatory", "course__code"]

    def __str__(self) -> str:  # pragma: no cover - human readable labels
        flag = "mandatory" if self.is_mandatory else "elective"
        return f"{self.group} - {self.course.code} ({flag})"


class RecommendedSequenceEntry(models.Model):
    program = models.ForeignKey(Program, on_delete=models.CASCADE, related_name="sequence_entries", verbose_name="Program")
    semester_number = models.PositiveSmallIntegerField("Recommended semester")
    recommended_order = models.PositiveSmallIntegerField("Order within semester", default=0)
    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="sequence_entries",
        null=True,
        blank=True,
        verbose_name="Course",
    )
    requirement_group = models.ForeignKey(
        RequirementGroup,
        on_delete=models.CASCADE,
        related_name="sequence_entries",
        null=True,
        blank=True,
        verbose_name="Requirement group",
    )
    notes = models.CharField("Notes", max_length=255, blank=True)

    class Meta:
        verbose_name = "Recommended sequence entry"
        verbose_name_plural = "Recommended sequence"
        ordering = ["program__code", "semester_number", "recommended_order", "id"]

    def __str__(self) -> str:  # pragma: no cover - human readable labels
        target = self.course.code if self.course_id else self.requirement_group.name
        return f"{self.program.code} semester {self.semester_number}: {target}"

    def clean(self):
        super().clean()
        if bool(self.course_id) == bool(self.requirement_group_id):
            raise ValidationError("A sequence entry references either a course or a requirement group.")
        if self.requirement_group_id and self.requirement_group.program_id != self.program_id:
            raise ValidationError("The requirement group must belong to the same program.")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class Semester(models.Model):
    term = models.CharField("Term", max_length=10, choices=TERM_CHOICES)
    year = models.PositiveSmallIntegerField("Year")
    name = models.CharField("Name", max_length=50, blank=True)

    class Meta:
        verbose_name = "Academic term"
        verbose_name_plural = "Academic terms"
        unique_together = [("term", "year")]
        ordering = ["year", "id"]

    def __str__(self) -> str:  # pragma: no cover - human readable labels
        return self.name or f"{self.get_term_display()} {self.year}"


class StudentProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="student_profile", verbose_name="Account")
    advisor = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="advisees",
        null=True,
        blank=True,
        verbose_name="Advisor",
    )
    enrollment_year = models.PositiveSmallIntegerField("Enrollment year")
    student_number = models.CharField("Student number", max_length=32, unique=True, null=True, blank=True)

    class Meta:
        verbose_name = "Student"
        verbose_name_plural = "Students"
        ordering = ["student_number", "user__username"]

    def __str__(self) -> str:  # pragma: no cover - human readable labels
        return self.user.get_full_name() or self.user.username


class StudentProgram(models.Model):
    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name="program_assignments", verbose_name="Student")
    program = models.ForeignKey(Program, on_delete=models.CASCADE, related_name="assignments", verbose_name="Program")
    program_type = models.CharField("Program type", max_length=20, choices=Program.PROGRAM_TYPE_CHOICES, blank=True)
    is_primary = models.BooleanField("Primary", default=False)

    class Meta:
        verbose_name = "Program assignment"
        verbose_name_plural = "Program assignments"
        unique_together = [("student", "program")]
        ordering = ["-is_primary", "id"]

    def __str__(self) -> str:  # pragma: no cover - human readable labels
        return f"{self.student.username} -> {self.program.name}"

    def clean(self):
        super().clean()
        if not self.program_id:
            return
        if not self.program_type:
            self.program_type = self.program.program_type
        elif self.program_type != self.program.program_type:
            raise ValidationError("The assignment type must match the program type.")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class TranscriptRecord(models.Model):
    COMPLETED = "COMPLETED"
    IN_PROGRESS = "IN_PROGRESS"
    TRANSFER = "TRANSFER"
    FAILED = "FAILED"
    STATUS_CHOICES = [
        (COMPLETED, "Completed"),
        (IN_PROGRESS, "In progress"),
        (TRANSFER, "Transfer credit"),
        (FAILED, "Failed"),
    ]

    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name="transcript_records", verbose_name="Student")
    course = models.ForeignKey(Course, on_delete=models.PROTECT, related_name="transcript_records", verbose_name="Course")
    semester = models.ForeignKey(
        Semester,
        on_delete=models.PROTECT,
        related_name="transcript_records",
        null=True,
        blank=True,
        verbose_name="Term",
    )
    grade = models.CharField("Grade", max_length=5, blank=True)
    status = models.CharField("Status", max_length=20, choices=STATUS_CHOICES)

    class Meta:
        verbose_name = "Transcript record"
        verbose_name_plural = "Transcript records"
        ordering = ["student", "semester__year", "course__code"]

    def __str__(self) -> str:  # pragma: no cover - human readable labels
        return f"{self.student.username} {self.course.code} {self.grade or '-'} ({self.status})"


class PlanDraft(models.Model):
    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name="plan_drafts", verbose_name="Student")
    name = models.CharField("Name", max_length=100)
    is_default = models.BooleanField("Default", default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Plan draft"
        verbose_name_plural = "Plan drafts"
        unique_together = [("student", "name")]
        ordering = ["student", "-is_default", "name"]

    def __str__(self) -> str:  # pragma: no cover - human readable labels
        return f"{self.student.username}: {self.name}"


class PlanSemester(models.Model):
    draft = models.ForeignKey(PlanDraft, on_delete=models.CASCADE, related_name="semesters", verbose_name="Draft")
    semester_number = models.PositiveSmallIntegerField("Semester number")
    term = models.CharField("Term", max_length=10, choices=TERM_CHOICES)
    year = models.PositiveSmallIntegerField("Year")
    is_locked = models.BooleanField("Locked", default=False)

    class Meta:
        verbose_name = "Plan semester"
        verbose_name_plural = "Plan semesters"
        unique_together = [("draft", "semester_number")]
        ordering = ["draft", "semester_number"]

    def __str__(self) -> str:  # pragma: no cover - human readable labels
        return f"{self.draft} #{self.semester_number} ({self.label})"

    @property
    def label(self) -> str:
        return f"{self.get_term_display()} {self.year}"


class PlanEntry(models.Model):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    STATUS_CHOICES = [
        (DRAFT, "Draft"),
        (SUBMITTED, "Submitted"),
        (APPROVED, "Approved"),
        (REJECTED, "Rejected"),
    ]

    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name="plan_entries", verbose_name="Student")
    draft = models.ForeignKey(PlanDraft, on_delete=models.CASCADE, related_name="entries", verbose_name="Draft")
    course = models.ForeignKey(Course, on_delete=models.PROTECT, related_name="plan_entries", verbose_name="Course")
    semester_number = models.PositiveSmallIntegerField("Semester number")
    semester_order = models.PositiveIntegerField("Order within semester", default=0)
    status = models.CharField("Status", max_length=20, choices=STATUS_CHOICES, default=DRAFT)
    prereqs_met = models.BooleanField("Prerequisites met", default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Planned course"
        verbose_name_plural = "Planned courses"
        unique_together = [("draft", "course")]
        ordering = ["draft", "semester_number", "semester_order", "id"]

    def __str__(self) -> str:  # pragma: no cover - human readable labels
        return f"{self.draft} S{self.semester_number} {self.course.code} ({self.status})"


class SemesterApproval(models.Model):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    NEEDS_REVISION = "NEEDS_REVISION"
    STATUS_CHOICES = [
        (PENDING, "Pending review"),
        (APPROVED, "Approved"),
        (NEEDS_REVISION, "Needs revision"),
    ]

    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name="semester_approvals", verbose_name="Student")
    semester = models.ForeignKey(Semester, on_delete=models.CASCADE, related_name="approvals", verbose_name="Term")
    draft = models.ForeignKey(
        PlanDraft,
        on_delete=models.SET_NULL,
        related_name="approvals",
        null=True,
        blank=True,
        verbose_name="Submitted draft",
    )
    advisor = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="semester_reviews",
        null=True,
        blank=True,
        verbose_name="Advisor",
    )
    status = models.CharField("Status", max_length=20, choices=STATUS_CHOICES, default=PENDING)
    comments = models.TextField("Advisor comments", blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Semester approval"
        verbose_name_plural = "Semester approvals"
        unique_together = [("student", "semester")]
        ordering = ["-updated_at"]

    def __str__(self) -> str:  # pragma: no cover - human readable labels
        return f"{self.student.username} {self.semester} ({self.status})"


class CourseOverride(models.Model):
    WAIVER = "WAIVER"
    SUBSTITUTION = "SUBSTITUTION"
    OVERRIDE_TYPE_CHOICES = [
        (WAIVER, "Waiver"),
        (SUBSTITUTION, "Substitution"),
    ]

    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name="course_overrides", verbose_name="Student")
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="overrides", verbose_name="Requirement course")
    override_type = models.CharField("Override type", max_length=20, choices=OVERRIDE_TYPE_CHOICES)
    substitute_course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="substitutions",
        null=True,
        blank=True,
        verbose_name="Substitute course",
    )
    rationale = models.TextField("Rationale")
    advisor = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="granted_overrides",
        null=True,
        blank=True,
        verbose_name="Granted by",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Course override"
        verbose_name_plural = "Course overrides"
        unique_together = [("student", "course")]
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover - human readable labels
        return f"{self.student.username} {self.course.code} ({self.get_override_type_display()})"

    def clean(self):
        super().clean()
        if self.override_type == self.SUBSTITUTION:
            if not self.substitute_course_id:
                raise ValidationError("A substitution needs a substitute course.")
            if self.substitute_course_id == self.course_id:
                raise ValidationError("A course cannot substitute for itself.")
        elif self.substitute_course_id:
            raise ValidationError("Only substitutions name a substitute course.")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class PlanReviewLog(models.Model):
    ACTION_CHOICES = [
        ("submitted", "Submitted"),
        ("approved", "Approved"),
        ("rejected", "Sent back"),
        ("revised", "Revised"),
    ]

    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name="plan_review_logs", verbose_name="Student")
    draft = models.ForeignKey(PlanDraft, on_delete=models.CASCADE, related_name="review_logs", verbose_name="Draft")
    semester_number = models.PositiveSmallIntegerField("Semester number")
    action = models.CharField("Action", max_length=16, choices=ACTION_CHOICES)
    actor = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="plan_review_actions",
        null=True,
        blank=True,
        verbose_name="Performed by",
    )
    comments = models.TextField("Comments", blank=True)
    created_at = models.DateTimeField("Time", auto_now_add=True)

    class Meta:
        verbose_name = "Plan review log"
        verbose_name_plural = "Plan review logs"
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - human readable labels
        return f"{self.draft} S{self.semester_number} -> {self.get_action_display()}"
