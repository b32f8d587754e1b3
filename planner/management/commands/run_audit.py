"""Print a student's degree audit."""
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from planner.audit import run_degree_audit
from planner.buckets import iter_buckets

User = get_user_model()


class Command(BaseCommand):
    help = "Run the degree audit for one student and print per-program and combined progress"

    def add_arguments(self, parser):
        parser.add_argument("username", help="Student account username")

    def handle(self, *args, **options):
        user = User.objects.filter(username=options["username"]).first()
        if user is None:
            raise CommandError(f"No user named {options['username']!r}.")

        audit = run_degree_audit(user.pk)
        for program in audit.programs:
            overall = program.overall
            self.stdout.write(
                self.style.MIGRATE_HEADING(
                    f"{program.program_name} ({program.program_type.lower()}): {overall.percent_complete}% "
                    f"- {overall.credits_done}/{overall.credits_required} credits"
                )
            )
            for bucket in iter_buckets(program.buckets):
                progress = bucket.progress
                self.stdout.write(
                    f"  {bucket.name}: {progress.percent}% "
                    f"({progress.credits_done} done, {progress.credits_in_progress} in progress, "
                    f"{progress.credits_required} required)"
                )

        combined = audit.combined
        self.stdout.write(
            self.style.SUCCESS(
                f"Combined: {combined.percent_complete}% "
                f"({combined.credits_done} done, {combined.credits_in_progress} in progress "
                f"of {combined.credits_required})"
            )
        )
        for course in audit.unassigned_courses:
            self.stdout.write(f"Unassigned: {course.code} {course.status}")
        for warning in audit.warnings:
            self.stdout.write(self.style.WARNING(f"[{warning.kind}] {warning.message}"))
