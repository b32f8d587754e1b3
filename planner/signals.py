"""Signals that provision a default plan draft for new student profiles."""
from __future__ import annotations

from django.db.models.signals import post_save
from django.dispatch import receiver

from planner.drafts import get_default_draft
from planner.models import StudentProfile


@receiver(post_save, sender=StudentProfile)
def ensure_default_draft(sender, instance: StudentProfile, created: bool, **kwargs):
    if created and not kwargs.get("raw", False):
        get_default_draft(instance.user_id)
