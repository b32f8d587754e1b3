import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse

from planner.lifecycle import add_course_to_plan, submit_plan
from planner.models import PlanEntry, RecommendedSequenceEntry

pytestmark = pytest.mark.django_db


@pytest.fixture
def student_client(client, student):
    client.force_login(student)
    return client


@pytest.fixture
def advisor_client(client, advisor, student):
    client.force_login(advisor)
    return client


@pytest.fixture
def course(make_course):
    return make_course("CS101")


def test_login_required(client, student):
    response = client.get(reverse("planner:audit"))
    assert response.status_code == 302


def test_non_students_are_refused(client):
    client.force_login(get_user_model().objects.create_user(username="visitor"))
    assert client.get(reverse("planner:audit")).status_code == 403


class TestStudentEndpoints:
    def test_audit(self, student_client, student, make_program, assign):
        assign(student, make_program("BS", total=12), is_primary=True)
        payload = student_client.get(reverse("planner:audit")).json()
        assert payload["major"]["program_code"] == "BS"
        assert payload["combined"]["credits_required"] == 12.0

    def test_prerequisite_check(self, student_client, make_course, add_prerequisite):
        intro, advanced = make_course("CS101"), make_course("CS201")
        add_prerequisite(advanced, intro)
        payload = student_client.get(reverse("planner:prerequisites", args=[advanced.pk])).json()
        assert payload == {"course_id": advanced.pk, "satisfied": False, "missing": ["CS101"]}

    def test_prerequisite_check_unknown_course_is_404(self, student_client):
        response = student_client.get(reverse("planner:prerequisites", args=[999999]))
        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"

    def test_add_and_remove_course(self, student_client, draft, course):
        url = reverse("planner:plan_courses", args=[draft.pk])
        response = student_client.post(url, {"course_id": course.pk, "semester_number": 1})
        assert response.status_code == 200
        assert response.json()["success"] is True

        duplicate = student_client.post(url, {"course_id": course.pk, "semester_number": 2})
        assert duplicate.status_code == 400
        assert duplicate.json()["kind"] == "integrity_violation"

        removed = student_client.delete(reverse("planner:plan_course_detail", args=[draft.pk, course.pk]))
        assert removed.status_code == 200
        assert not PlanEntry.objects.exists()

    def test_invalid_form(self, student_client, draft):
        response = student_client.post(reverse("planner:plan_courses", args=[draft.pk]), {"semester_number": 0})
        assert response.status_code == 400
        assert set(response.json()["errors"]) == {"course_id", "semester_number"}

    def test_move(self, student_client, student, draft, course):
        add_course_to_plan(student.pk, draft.pk, course.pk, 1)
        response = student_client.post(
            reverse("planner:plan_course_move", args=[draft.pk, course.pk]), {"semester_number": 3}
        )
        assert response.status_code == 200
        assert PlanEntry.objects.get().semester_number == 3

    def test_submit_empty_semester_conflicts(self, student_client, draft):
        response = student_client.post(reverse("planner:semester_submit", args=[draft.pk, 1]))
        assert response.status_code == 409
        assert response.json()["kind"] == "guard_violation"

    def test_semester_and_draft_detail(self, student_client, student, draft, course):
        add_course_to_plan(student.pk, draft.pk, course.pk, 1)
        semester = student_client.get(reverse("planner:semester_detail", args=[draft.pk, 1])).json()
        assert semester["label"] == "Fall 2025"
        assert semester["courses"][0]["code"] == "CS101"
        detail = student_client.get(reverse("planner:draft_detail", args=[draft.pk])).json()
        assert len(detail["semesters"]) == 8

    def test_unknown_draft_is_404(self, student_client):
        response = student_client.get(reverse("planner:draft_detail", args=[999999]))
        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"

    def test_drafts(self, student_client, draft):
        created = student_client.post(reverse("planner:drafts"), {"name": "What if"}).json()
        assert created["success"] is True
        listing = student_client.get(reverse("planner:drafts")).json()
        assert [(row["name"], row["is_default"]) for row in listing] == [
            ("Default Plan", True),
            ("What if", False),
        ]
        deleted = student_client.delete(reverse("planner:draft_detail", args=[draft.pk]))
        assert deleted.status_code == 409

    def test_add_semester(self, student_client, draft):
        payload = student_client.post(reverse("planner:semesters", args=[draft.pk]), {"force_summer": "on"}).json()
        assert payload["data"]["semester_number"] == 9

    def test_autofill_without_major_is_404(self, student_client, draft):
        response = student_client.post(reverse("planner:autofill", args=[draft.pk]), {})
        assert response.status_code == 404

    def test_autofill_apply(self, student_client, student, draft, course, make_program, assign, make_group):
        program = make_program("BS")
        make_group(program, "Core", mandatory=[course])
        RecommendedSequenceEntry.objects.create(program=program, semester_number=1, course=course)
        assign(student, program, is_primary=True)
        payload = student_client.post(reverse("planner:autofill", args=[draft.pk]), {"apply": "on"}).json()
        assert [row["course_code"] for row in payload["additions"]] == ["CS101"]
        assert payload["applied"][0]["success"] is True
        assert PlanEntry.objects.filter(draft=draft, course=course).exists()


class TestAdvisorEndpoints:
    def test_students_cannot_decide(self, student_client, draft, student):
        url = reverse("planner:advisor_decision", args=[student.pk, draft.pk, 1])
        assert student_client.post(url, {"decision": "approve"}).status_code == 403

    def test_reject_needs_comments_then_succeeds(self, advisor_client, student, draft, course):
        add_course_to_plan(student.pk, draft.pk, course.pk, 1)
        submit_plan(student.pk, draft.pk, 1)
        url = reverse("planner:advisor_decision", args=[student.pk, draft.pk, 1])

        refused = advisor_client.post(url, {"decision": "reject"})
        assert refused.status_code == 409
        accepted = advisor_client.post(url, {"decision": "reject", "comments": "Add a math course"})
        assert accepted.status_code == 200
        assert PlanEntry.objects.get().status == PlanEntry.REJECTED

    def test_approve(self, advisor_client, student, draft, course):
        add_course_to_plan(student.pk, draft.pk, course.pk, 1)
        submit_plan(student.pk, draft.pk, 1)
        url = reverse("planner:advisor_decision", args=[student.pk, draft.pk, 1])
        assert advisor_client.post(url, {"decision": "approve"}).json()["success"] is True
        assert PlanEntry.objects.get().status == PlanEntry.APPROVED

    def test_student_audit_only_for_advisees(self, advisor_client, student, other_advisor):
        assert advisor_client.get(reverse("planner:advisor_student_audit", args=[student.pk])).status_code == 200
        assert advisor_client.get(reverse("planner:advisor_student_audit", args=[other_advisor.pk])).status_code == 403
