"""Middleware that reports planning failures escaping a view as JSON errors."""
from __future__ import annotations

import logging

from django.http import JsonResponse

from planner.errors import PlanError

logger = logging.getLogger(__name__)


class PlanningErrorMiddleware:
    """Turn an uncaught ``PlanError`` into a structured JSON failure response."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not isinstance(exception, PlanError):
            return None
        logger.info("%s %s failed (%s): %s", request.method, request.path_info, exception.kind, exception.message)
        return JsonResponse(
            {"success": False, "kind": exception.kind, "message": exception.message},
            status=exception.status_code,
        )
