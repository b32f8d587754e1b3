"""Propose (and optionally add) courses for a student's default draft."""
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from planner.autofill import FILL_MODES, FILL_REMAINING, apply_autofill_suggestions, generate_autofill_suggestions
from planner.drafts import get_default_draft
from planner.errors import PlanError

User = get_user_model()


class Command(BaseCommand):
    help = "Generate auto-fill suggestions for a student's default draft"

    def add_arguments(self, parser):
        parser.add_argument("username", help="Student account username")
        parser.add_argument("--mode", choices=FILL_MODES, default=FILL_REMAINING, help="Semesters to fill")
        parser.add_argument("--apply", action="store_true", help="Add the suggestions to the draft")

    def handle(self, *args, **options):
        user = User.objects.filter(username=options["username"]).first()
        if user is None:
            raise CommandError(f"No user named {options['username']!r}.")

        try:
            draft = get_default_draft(user.pk)
            plan = generate_autofill_suggestions(user.pk, draft.pk, options["mode"])
        except PlanError as exc:
            raise CommandError(exc.message) from exc

        for suggestion in plan.additions:
            marker = "" if suggestion.prereqs_met else f" (missing {', '.join(suggestion.missing_prereqs)})"
            self.stdout.write(
                f"S{suggestion.suggested_semester} {suggestion.course_code} [{suggestion.category}]{marker}"
            )
        for conflict in plan.conflicts:
            self.stdout.write(self.style.WARNING(f"{conflict.course_code}: {conflict.reason}"))

        if not options["apply"]:
            self.stdout.write(self.style.SUCCESS(f"{len(plan.additions)} suggestion(s); rerun with --apply to add them."))
            return

        results = apply_autofill_suggestions(user.pk, draft.pk, plan.additions)
        added = sum(1 for result in results if result.success)
        for result in results:
            if not result.success:
                self.stdout.write(self.style.ERROR(result.message))
        self.stdout.write(self.style.SUCCESS(f"Added {added} of {len(results)} suggested course(s) to '{draft.name}'."))
