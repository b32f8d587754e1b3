from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from planner.models import PlanEntry, PlanSemester, StudentProfile

pytestmark = pytest.mark.django_db


@pytest.fixture
def demo():
    call_command("bootstrap_demo", stdout=StringIO())
    return StudentProfile.objects.select_related("user").get(user__username="student")


def run(*args):
    out = StringIO()
    call_command(*args, stdout=out)
    return out.getvalue()


def test_bootstrap_is_repeatable(demo):
    call_command("bootstrap_demo", stdout=StringIO())
    assert StudentProfile.objects.count() == 1
    locked = PlanSemester.objects.filter(draft__student=demo.user, is_locked=True)
    assert sorted(locked.values_list("semester_number", flat=True)) == [1, 2]


def test_run_audit(demo):
    output = run("run_audit", "student")
    assert "Computer Science (major)" in output
    assert "Mathematics (minor)" in output
    assert "Combined:" in output
    assert "ENG101 needs to be retaken (Grade: F)" in output


def test_autofill_plan_preview_and_apply(demo):
    preview = run("autofill_plan", "student")
    assert "rerun with --apply" in preview
    assert not PlanEntry.objects.exists()

    applied = run("autofill_plan", "student", "--apply")
    assert "Added" in applied
    entries = PlanEntry.objects.filter(student=demo.user)
    assert entries.exists()
    assert not entries.filter(semester_number__lte=2).exists()


def test_unknown_user():
    with pytest.raises(CommandError):
        run("run_audit", "nobody")
