"""JSON views over the audit, planning, review and auto-fill operations."""
from __future__ import annotations

from dataclasses import asdict
from decimal import Decimal

from django.contrib.auth.mixins import LoginRequiredMixin
from django.core.serializers.json import DjangoJSONEncoder
from django.http import HttpResponseForbidden, JsonResponse
from django.views import View

from . import drafts, lifecycle
from .audit import run_degree_audit
from .autofill import apply_autofill_suggestions, generate_autofill_suggestions
from .errors import ActionResult
from .forms import AutoFillForm, DraftForm, MoveCourseForm, PlanCourseForm, PlanDecisionForm, SemesterForm
from .models import PlanDraft, StudentProfile
from .prerequisites import plan_completed_ids, resolve_prerequisites


class PlannerJSONEncoder(DjangoJSONEncoder):
    def default(self, o):
        if isinstance(o, Decimal):
            return float(o)
        return super().default(o)


def json_response(payload, status: int = 200) -> JsonResponse:
    return JsonResponse(payload, status=status, encoder=PlannerJSONEncoder, safe=False)


def result_response(result: ActionResult) -> JsonResponse:
    return json_response(result.as_dict(), status=200 if result.success else result.status_code)


def form_error_response(form) -> JsonResponse:
    return json_response({"success": False, "kind": "invalid", "errors": form.errors.get_json_data()}, status=400)


class StudentPortalMixin(LoginRequiredMixin):
    def dispatch(self, request, *args, **kwargs):
        if request.user.is_authenticated and not hasattr(request.user, "student_profile"):
            return HttpResponseForbidden("Only students can use the planner.")
        return super().dispatch(request, *args, **kwargs)


class DegreeAuditView(StudentPortalMixin, View):
    def get(self, request):
        return json_response(run_degree_audit(request.user.id).as_dict())


class PrerequisiteCheckView(StudentPortalMixin, View):
    def get(self, request, course_id):
        check = resolve_prerequisites(course_id, plan_completed_ids(request.user.id))
        return json_response({"course_id": course_id, "satisfied": check.satisfied, "missing": check.missing})


class DraftListView(StudentPortalMixin, View):
    def get(self, request):
        drafts.get_default_draft(request.user.id)
        rows = PlanDraft.objects.filter(student=request.user).order_by("-is_default", "name")
        return json_response(
            [{"draft_id": draft.pk, "name": draft.name, "is_default": draft.is_default} for draft in rows]
        )

    def post(self, request):
        form = DraftForm(request.POST)
        if not form.is_valid():
            return form_error_response(form)
        return result_response(drafts.create_draft(request.user.id, form.cleaned_data["name"]))


class DraftDetailView(StudentPortalMixin, View):
    def get(self, request, draft_id):
        plan = lifecycle.get_plan(request.user.id, draft_id)
        return json_response({"draft_id": draft_id, "semesters": [asdict(semester) for semester in plan]})

    def post(self, request, draft_id):
        form = DraftForm(request.POST)
        if not form.is_valid():
            return form_error_response(form)
        return result_response(drafts.rename_draft(request.user.id, draft_id, form.cleaned_data["name"]))

    def delete(self, request, draft_id):
        return result_response(drafts.delete_draft(request.user.id, draft_id))


class DraftDefaultView(StudentPortalMixin, View):
    def post(self, request, draft_id):
        return result_response(drafts.set_default_draft(request.user.id, draft_id))


class PlanSemesterListView(StudentPortalMixin, View):
    def post(self, request, draft_id):
        form = SemesterForm(request.POST)
        form.is_valid()
        force_summer = form.cleaned_data.get("force_summer", False)
        return result_response(drafts.add_semester(request.user.id, draft_id, force_summer=force_summer))


class PlanSemesterView(StudentPortalMixin, View):
    def get(self, request, draft_id, semester_number):
        return json_response(asdict(lifecycle.get_semester_plan(request.user.id, draft_id, semester_number)))

    def delete(self, request, draft_id, semester_number):
        return result_response(drafts.remove_semester(request.user.id, draft_id, semester_number))


class PlanCourseView(StudentPortalMixin, View):
    def post(self, request, draft_id):
        form = PlanCourseForm(request.POST)
        if not form.is_valid():
            return form_error_response(form)
        return result_response(
            lifecycle.add_course_to_plan(
                request.user.id,
                draft_id,
                form.cleaned_data["course_id"],
                form.cleaned_data["semester_number"],
            )
        )


class PlanCourseDetailView(StudentPortalMixin, View):
    def delete(self, request, draft_id, course_id):
        return result_response(lifecycle.remove_course_from_plan(request.user.id, draft_id, course_id))


class MoveCourseView(StudentPortalMixin, View):
    def post(self, request, draft_id, course_id):
        form = MoveCourseForm(request.POST)
        if not form.is_valid():
            return form_error_response(form)
        return result_response(
            lifecycle.move_course(
                request.user.id,
                draft_id,
                course_id,
                form.cleaned_data["semester_number"],
                form.cleaned_data.get("order"),
            )
        )


class SemesterSubmitView(StudentPortalMixin, View):
    def post(self, request, draft_id, semester_number):
        return result_response(lifecycle.submit_plan(request.user.id, draft_id, semester_number))


class SemesterReviseView(StudentPortalMixin, View):
    def post(self, request, draft_id, semester_number):
        return result_response(lifecycle.revise_plan(request.user.id, draft_id, semester_number))


class AutoFillView(StudentPortalMixin, View):
    def post(self, request, draft_id):
        form = AutoFillForm(request.POST)
        if not form.is_valid():
            return form_error_response(form)
        plan = generate_autofill_suggestions(request.user.id, draft_id, form.cleaned_data["fill_mode"])
        payload = plan.as_dict()
        if form.cleaned_data.get("apply"):
            results = apply_autofill_suggestions(request.user.id, draft_id, plan.additions)
            payload["applied"] = [result.as_dict() for result in results]
        return json_response(payload)


class AdvisorMixin(LoginRequiredMixin):
    def dispatch(self, request, *args, **kwargs):
        if request.user.is_authenticated and not request.user.advisees.exists():
            return HttpResponseForbidden("Only advisors can review plans.")
        return super().dispatch(request, *args, **kwargs)


class AdvisorStudentAuditView(AdvisorMixin, View):
    def get(self, request, student_id):
        if not StudentProfile.objects.filter(user_id=student_id, advisor=request.user).exists():
            return HttpResponseForbidden("You are not the assigned advisor for this student.")
        return json_response(run_degree_audit(student_id).as_dict())


class AdvisorDecisionView(AdvisorMixin, View):
    def post(self, request, student_id, draft_id, semester_number):
        form = PlanDecisionForm(request.POST)
        if not form.is_valid():
            return form_error_response(form)
        comments = form.cleaned_data.get("comments", "")
        if form.cleaned_data["decision"] == "approve":
            result = lifecycle.approve_plan(request.user.id, student_id, draft_id, semester_number, comments)
        else:
            result = lifecycle.reject_plan(request.user.id, student_id, draft_id, semester_number, comments)
        return result_response(result)
