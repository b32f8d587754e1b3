"""Forms validating the input of the planning and advising endpoints."""
from __future__ import annotations

from django import forms

from .autofill import FILL_ALL, FILL_REMAINING


class PlanCourseForm(forms.Form):
    course_id = forms.IntegerField(label="Course", min_value=1)
    semester_number = forms.IntegerField(label="Semester", min_value=1)


class MoveCourseForm(forms.Form):
    semester_number = forms.IntegerField(label="Target semester", min_value=1)
    order = forms.IntegerField(label="Position", min_value=0, required=False)


class PlanDecisionForm(forms.Form):
    DECISIONS = [
        ("approve", "Approve"),
        ("reject", "Request changes"),
    ]

    decision = forms.ChoiceField(label="Decision", choices=DECISIONS)
    comments = forms.CharField(label="Comments", required=False, widget=forms.Textarea)


class AutoFillForm(forms.Form):
    FILL_MODE_CHOICES = [
        (FILL_REMAINING, "Remaining semesters"),
        (FILL_ALL, "All semesters"),
    ]

    fill_mode = forms.ChoiceField(label="Fill", choices=FILL_MODE_CHOICES, initial=FILL_REMAINING, required=False)
    apply = forms.BooleanField(label="Add suggestions to the plan", required=False)

    def clean_fill_mode(self):
        return self.cleaned_data.get("fill_mode") or FILL_REMAINING


class DraftForm(forms.Form):
    name = forms.CharField(label="Draft name", max_length=100)


class SemesterForm(forms.Form):
    force_summer = forms.BooleanField(label="Summer term", required=False)
