from django.apps import AppConfig


class PlannerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "planner"
    verbose_name = "Degree planning and advising"

    def ready(self) -> None:  # pragma: no cover - Django convention
        from . import signals  # noqa: F401
