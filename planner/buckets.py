"""Requirement bucket tree with bottom-up credit and course roll-up."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Iterator

DONE = "DONE"
WAIVED = "WAIVED"
IN_PROGRESS = "IN_PROGRESS"
MISSING = "MISSING"

STATUS_PRIORITY = {WAIVED: 3, DONE: 3, IN_PROGRESS: 2, MISSING: 1}
COUNTS_AS_DONE = frozenset({DONE, WAIVED})

ZERO = Decimal("0")
HALF = Decimal("0.5")


@dataclass
class CourseAuditStatus:
    course_id: int
    code: str
    title: str
    credits: Decimal
    status: str = MISSING
    is_mandatory: bool = True
    grade: str = ""


@dataclass
class BucketProgress:
    credits_done: Decimal = ZERO
    credits_in_progress: Decimal = ZERO
    credits_required: Decimal = ZERO
    courses_done: int = 0
    courses_required: int = 0
    percent: int = 0


@dataclass
class Bucket:
    group_id: int
    name: str
    parent_id: int | None = None
    credits_required: Decimal | None = None
    min_courses_required: int | None = None
    courses: list[CourseAuditStatus] = field(default_factory=list)
    children: list["Bucket"] = field(default_factory=list)
    progress: BucketProgress = field(default_factory=BucketProgress)

    def walk(self) -> Iterator["Bucket"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def all_courses(self) -> list[CourseAuditStatus]:
        """Own and descendant courses, one row per course at its best status."""
        return dedupe_courses(course for bucket in self.walk() for course in bucket.courses)


def is_better(candidate: CourseAuditStatus, current: CourseAuditStatus | None) -> bool:
    return current is None or STATUS_PRIORITY[candidate.status] > STATUS_PRIORITY[current.status]


def dedupe_courses(courses: Iterable[CourseAuditStatus]) -> list[CourseAuditStatus]:
    best: dict[int, CourseAuditStatus] = {}
    for course in courses:
        if is_better(course, best.get(course.course_id)):
            best[course.course_id] = course
    return list(best.values())


def percent_of(credits_done, credits_in_progress, credits_required) -> int:
    """Half credit for work under way, rounded half up and capped at 100."""

    required = Decimal(credits_required)
    if required <= 0:
        return 100
    ratio = (Decimal(credits_done) + HALF * Decimal(credits_in_progress)) / required * 100
    return min(100, int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))


def compute_progress(
    courses: list[CourseAuditStatus],
    credits_required=None,
    min_courses_required: int | None = None,
) -> BucketProgress:
    credits_done = sum((c.credits for c in courses if c.status in COUNTS_AS_DONE), ZERO)
    credits_in_progress = sum((c.credits for c in courses if c.status == IN_PROGRESS), ZERO)
    if credits_required:
        required = Decimal(credits_required)
    else:
        required = sum((c.credits for c in courses), ZERO)
    return BucketProgress(
        credits_done=credits_done,
        credits_in_progress=credits_in_progress,
        credits_required=required,
        courses_done=sum(1 for c in courses if c.status in COUNTS_AS_DONE),
        courses_required=min_courses_required or len(courses),
        percent=percent_of(credits_done, credits_in_progress, required),
    )


def _closes_cycle(bucket: Bucket, by_id: dict[int, Bucket]) -> bool:
    seen = set()
    current = bucket.parent_id
    while current is not None and current not in seen:
        if current == bucket.group_id:
            return True
        seen.add(current)
        parent = by_id.get(current)
        current = parent.parent_id if parent else None
    return False


def _roll_up(bucket: Bucket) -> None:
    for child in bucket.children:
        _roll_up(child)
    bucket.progress = compute_progress(
        bucket.all_courses(), bucket.credits_required, bucket.min_courses_required
    )


def build_bucket_tree(buckets: list[Bucket]) -> list[Bucket]:
    """Attach buckets to their parents and compute progress bottom-up.

    Buckets whose parent is unknown, or whose parent link would close a cycle,
    become roots. Returns the roots in input order.
    """

    by_id = {bucket.group_id: bucket for bucket in buckets}
    roots = []
    for bucket in buckets:
        parent = by_id.get(bucket.parent_id) if bucket.parent_id is not None else None
        if parent is None or _closes_cycle(bucket, by_id):
            roots.append(bucket)
        else:
            parent.children.append(bucket)
    for root in roots:
        _roll_up(root)
    return roots


def iter_buckets(roots: Iterable[Bucket]) -> Iterator[Bucket]:
    for root in roots:
        yield from root.walk()


def best_status_map(roots: Iterable[Bucket], into: dict[int, CourseAuditStatus] | None = None) -> dict[int, CourseAuditStatus]:
    """Index every course in the trees by id, keeping its best status."""

    best = {} if into is None else into
    for bucket in iter_buckets(roots):
        for course in bucket.courses:
            if is_better(course, best.get(course.course_id)):
                best[course.course_id] = course
    return best
