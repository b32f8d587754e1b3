"""Admin configuration for the catalog, program requirements and student plans."""
from django.contrib import admin, messages

from .audit import run_degree_audit
from .models import (
    Course,
    CourseDependency,
    CourseOverride,
    PlanDraft,
    PlanEntry,
    PlanReviewLog,
    PlanSemester,
    Program,
    RecommendedSequenceEntry,
    RequirementGroup,
    RequirementGroupCourse,
    Semester,
    SemesterApproval,
    StudentProfile,
    StudentProgram,
    TranscriptRecord,
)


class CourseDependencyInline(admin.TabularInline):
    model = CourseDependency
    fk_name = "course"
    extra = 0
    fields = ("kind", "dependency_course", "required_status", "logic_set_id")


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("code", "title", "credits", "is_active")
    list_filter = ("is_active",)
    search_fields = ("code", "title")
    inlines = [CourseDependencyInline]


@admin.register(CourseDependency)
class CourseDependencyAdmin(admin.ModelAdmin):
    list_display = ("course", "kind", "dependency_course", "required_status", "logic_set_id")
    list_filter = ("kind",)
    search_fields = ("course__code", "dependency_course__code")


class RequirementGroupCourseInline(admin.TabularInline):
    model = RequirementGroupCourse
    extra = 0
    fields = ("course", "is_mandatory")


class RequirementGroupInline(admin.TabularInline):
    model = RequirementGroup
    extra = 0
    fields = ("name", "parent", "credits_required", "min_courses_required", "sort_order")


class RecommendedSequenceInline(admin.TabularInline):
    model = RecommendedSequenceEntry
    extra = 0
    fields = ("semester_number", "recommended_order", "course", "requirement_group", "notes")


@admin.register(Program)
class ProgramAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "program_type", "total_credits_required", "parent_program")
    list_filter = ("program_type",)
    search_fields = ("code", "name")
    inlines = [RequirementGroupInline, RecommendedSequenceInline]


@admin.register(RequirementGroup)
class RequirementGroupAdmin(admin.ModelAdmin):
    list_display = ("name", "program", "parent", "credits_required", "min_courses_required")
    list_filter = ("program",)
    search_fields = ("name", "program__name", "group_courses__course__code")
    inlines = [RequirementGroupCourseInline]


@admin.register(StudentProfile)
class StudentProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "student_number", "advisor", "enrollment_year")
    search_fields = ("user__username", "student_number", "advisor__username")
    actions = ["report_degree_progress"]

    @admin.action(description="Report degree progress for the selected students")
    def report_degree_progress(self, request, queryset):
        for profile in queryset.select_related("user"):
            audit = run_degree_audit(profile.user_id)
            if audit.warnings and not audit.programs:
                self.message_user(request, f"{profile}: {audit.warnings[0].message}", level=messages.WARNING)
                continue
            combined = audit.combined
            self.message_user(
                request,
                f"{profile}: {combined.percent_complete}% "
                f"({combined.credits_done} of {combined.credits_required} credits done)",
                level=messages.INFO,
            )


@admin.register(StudentProgram)
class StudentProgramAdmin(admin.ModelAdmin):
    list_display = ("student", "program", "program_type", "is_primary")
    list_filter = ("program_type", "is_primary")
    search_fields = ("student__username", "program__name")


@admin.register(TranscriptRecord)
class TranscriptRecordAdmin(admin.ModelAdmin):
    list_display = ("student", "course", "semester", "grade", "status")
    list_filter = ("status", "semester")
    search_fields = ("student__username", "course__code")


class PlanSemesterInline(admin.TabularInline):
    model = PlanSemester
    extra = 0
    fields = ("semester_number", "term", "year", "is_locked")


@admin.register(PlanDraft)
class PlanDraftAdmin(admin.ModelAdmin):
    list_display = ("student", "name", "is_default", "updated_at")
    list_filter = ("is_default",)
    search_fields = ("student__username", "name")
    inlines = [PlanSemesterInline]


@admin.register(PlanSemester)
class PlanSemesterAdmin(admin.ModelAdmin):
    list_display = ("draft", "semester_number", "term", "year", "is_locked")
    list_filter = ("term", "is_locked")
    search_fields = ("draft__student__username", "draft__name")
    actions = ["unlock_semesters"]

    @admin.action(description="Unlock the selected semesters")
    def unlock_semesters(self, request, queryset):
        updated = queryset.filter(is_locked=True).update(is_locked=False)
        if updated:
            self.message_user(request, f"Unlocked {updated} semester(s).", level=messages.SUCCESS)
        else:
            self.message_user(request, "No locked semesters were selected.", level=messages.INFO)


@admin.register(PlanEntry)
class PlanEntryAdmin(admin.ModelAdmin):
    list_display = ("student", "draft", "course", "semester_number", "status", "prereqs_met")
    list_filter = ("status", "prereqs_met")
    search_fields = ("student__username", "course__code", "draft__name")


@admin.register(SemesterApproval)
class SemesterApprovalAdmin(admin.ModelAdmin):
    list_display = ("student", "semester", "advisor", "status", "updated_at")
    list_filter = ("status", "semester")
    search_fields = ("student__username", "advisor__username")


@admin.register(CourseOverride)
class CourseOverrideAdmin(admin.ModelAdmin):
    list_display = ("student", "course", "override_type", "substitute_course", "advisor", "created_at")
    list_filter = ("override_type",)
    search_fields = ("student__username", "course__code")


@admin.register(PlanReviewLog)
class PlanReviewLogAdmin(admin.ModelAdmin):
    list_display = ("student", "draft", "semester_number", "action", "actor", "created_at")
    list_filter = ("action",)
    search_fields = ("student__username",)


@admin.register(Semester)
class SemesterAdmin(admin.ModelAdmin):
    list_display = ("term", "year", "name")
    list_filter = ("term",)
    search_fields = ("name",)
