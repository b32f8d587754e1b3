"""Domain failures raised by planning operations and their structured results."""
from __future__ import annotations

import functools
import logging
from dataclasses import asdict, dataclass, field

logger = logging.getLogger(__name__)


class PlanError(Exception):
    """Base class for recoverable planning failures."""

    kind = "error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(PlanError):
    kind = "not_found"
    status_code = 404


class GuardViolation(PlanError):
    kind = "guard_violation"
    status_code = 409


class AdvisorNotAssigned(GuardViolation):
    status_code = 403


class CapacityViolation(PlanError):
    kind = "capacity_violation"


class IntegrityViolation(PlanError):
    kind = "integrity_violation"


@dataclass
class ActionResult:
    success: bool
    message: str
    kind: str | None = None
    warnings: list[str] = field(default_factory=list)
    data: dict = field(default_factory=dict)
    status_code: int = field(default=200, repr=False)

    @classmethod
    def ok(cls, message: str, warnings: list[str] | None = None, **data) -> "ActionResult":
        return cls(True, message, warnings=list(warnings or []), data=data)

    @classmethod
    def failure(cls, error: PlanError) -> "ActionResult":
        return cls(False, error.message, kind=error.kind, status_code=error.status_code)

    def as_dict(self) -> dict:
        payload = asdict(self)
        payload.pop("status_code")
        return payload


def plan_action(func):
    """Run a planning operation, turning a raised PlanError into a failed ActionResult.

    The operation raises from inside its ``transaction.atomic()`` block, so the
    transaction is rolled back before the failure is reported.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> ActionResult:
        try:
            return func(*args, **kwargs)
        except PlanError as exc:
            logger.info("%s refused (%s): %s", func.__name__, exc.kind, exc.message)
            return ActionResult.failure(exc)

    return wrapper
