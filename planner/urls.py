"""URL routes for the planner endpoints."""
from django.urls import path

from . import views

app_name = "planner"

urlpatterns = [
    path("audit/", views.DegreeAuditView.as_view(), name="audit"),
    path("courses/<int:course_id>/prerequisites/", views.PrerequisiteCheckView.as_view(), name="prerequisites"),
    path("drafts/", views.DraftListView.as_view(), name="drafts"),
    path("drafts/<int:draft_id>/", views.DraftDetailView.as_view(), name="draft_detail"),
    path("drafts/<int:draft_id>/default/", views.DraftDefaultView.as_view(), name="draft_default"),
    path("drafts/<int:draft_id>/semesters/", views.PlanSemesterListView.as_view(), name="semesters"),
    path(
        "drafts/<int:draft_id>/semesters/<int:semester_number>/",
        views.PlanSemesterView.as_view(),
        name="semester_detail",
    ),
    path(
        "drafts/<int:draft_id>/semesters/<int:semester_number>/submit/",
        views.SemesterSubmitView.as_view(),
        name="semester_submit",
    ),
    path(
        "drafts/<int:draft_id>/semesters/<int:semester_number>/revise/",
        views.SemesterReviseView.as_view(),
        name="semester_revise",
    ),
    path("drafts/<int:draft_id>/courses/", views.PlanCourseView.as_view(), name="plan_courses"),
    path(
        "drafts/<int:draft_id>/courses/<int:course_id>/",
        views.PlanCourseDetailView.as_view(),
        name="plan_course_detail",
    ),
    path(
        "drafts/<int:draft_id>/courses/<int:course_id>/move/",
        views.MoveCourseView.as_view(),
        name="plan_course_move",
    ),
    path("drafts/<int:draft_id>/auto-fill/", views.AutoFillView.as_view(), name="autofill"),
    path(
        "advisor/students/<int:student_id>/audit/",
        views.AdvisorStudentAuditView.as_view(),
        name="advisor_student_audit",
    ),
    path(
        "advisor/students/<int:student_id>/drafts/<int:draft_id>/semesters/<int:semester_number>/decision/",
        views.AdvisorDecisionView.as_view(),
        name="advisor_decision",
    ),
]
