import pytest
from django.contrib.messages import get_messages
from django.urls import reverse

from planner.models import PlanSemester, StudentProfile

pytestmark = pytest.mark.django_db


def test_unlock_semesters_action(admin_client, draft):
    PlanSemester.objects.filter(draft=draft, semester_number__in=[1, 2]).update(is_locked=True)
    selected = PlanSemester.objects.filter(draft=draft, semester_number__in=[1, 2, 3])
    response = admin_client.post(
        reverse("admin:planner_plansemester_changelist"),
        {"action": "unlock_semesters", "_selected_action": [str(pk) for pk in selected.values_list("pk", flat=True)]},
    )
    assert response.status_code == 302
    assert not PlanSemester.objects.filter(draft=draft, is_locked=True).exists()


def test_report_degree_progress_action(admin_client, student, make_program, assign):
    assign(student, make_program("BS", total=12), is_primary=True)
    profile = StudentProfile.objects.get(user=student)
    response = admin_client.post(
        reverse("admin:planner_studentprofile_changelist"),
        {"action": "report_degree_progress", "_selected_action": [str(profile.pk)]},
        follow=True,
    )
    messages = [str(message) for message in get_messages(response.wsgi_request)]
    assert any("0%" in message for message in messages)


def test_changelists_render(admin_client, draft):
    for name in ("course", "program", "requirementgroup", "plandraft", "planentry", "semesterapproval"):
        assert admin_client.get(reverse(f"admin:planner_{name}_changelist")).status_code == 200
