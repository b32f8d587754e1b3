from decimal import Decimal

from planner.buckets import (
    DONE,
    IN_PROGRESS,
    MISSING,
    WAIVED,
    Bucket,
    CourseAuditStatus,
    best_status_map,
    build_bucket_tree,
    compute_progress,
    percent_of,
)


def course(course_id, status, credits=3, code=None):
    return CourseAuditStatus(
        course_id=course_id,
        code=code or f"C{course_id}",
        title=f"Course {course_id}",
        credits=Decimal(credits),
        status=status,
    )


class TestPercent:
    def test_in_progress_counts_half(self):
        assert percent_of(Decimal(3), Decimal(3), Decimal(12)) == 38

    def test_never_exceeds_100(self):
        assert percent_of(Decimal(30), Decimal(0), Decimal(12)) == 100

    def test_nothing_required_is_complete(self):
        assert percent_of(Decimal(0), Decimal(0), Decimal(0)) == 100


class TestComputeProgress:
    def test_done_and_in_progress_against_explicit_requirement(self):
        progress = compute_progress([course(1, DONE), course(2, IN_PROGRESS)], Decimal(12))
        assert progress.credits_done == Decimal(3)
        assert progress.credits_in_progress == Decimal(3)
        assert progress.credits_required == Decimal(12)
        assert progress.percent == 38

    def test_requirement_falls_back_to_course_credits(self):
        progress = compute_progress([course(1, DONE), course(2, MISSING, credits=1)])
        assert progress.credits_required == Decimal(4)
        assert progress.percent == 75
        assert progress.courses_required == 2

    def test_waived_counts_as_done(self):
        progress = compute_progress([course(1, WAIVED)], Decimal(3), min_courses_required=1)
        assert progress.courses_done == 1
        assert progress.percent == 100


class TestBuildBucketTree:
    def test_parent_rolls_up_union_of_descendants(self):
        parent = Bucket(group_id=1, name="Core", credits_required=Decimal(9), courses=[course(1, DONE)])
        child = Bucket(group_id=2, name="Systems", parent_id=1, courses=[course(1, DONE), course(2, IN_PROGRESS)])
        roots = build_bucket_tree([parent, child])

        assert roots == [parent]
        assert parent.children == [child]
        # course 1 sits in both buckets and is counted once
        assert parent.progress.credits_done == Decimal(3)
        assert parent.progress.credits_in_progress == Decimal(3)
        assert parent.progress.percent == 50
        assert child.progress.credits_required == Decimal(6)

    def test_union_keeps_best_status(self):
        parent = Bucket(group_id=1, name="Core", courses=[course(1, MISSING)])
        child = Bucket(group_id=2, name="Sub", parent_id=1, courses=[course(1, DONE)])
        build_bucket_tree([parent, child])
        assert [c.status for c in parent.all_courses()] == [DONE]
        assert parent.progress.percent == 100

    def test_unknown_parent_becomes_root(self):
        orphan = Bucket(group_id=5, name="Orphan", parent_id=99, courses=[course(1, DONE)])
        assert build_bucket_tree([orphan]) == [orphan]

    def test_cycle_does_not_recurse_forever(self):
        first = Bucket(group_id=1, name="A", parent_id=2, courses=[course(1, DONE)])
        second = Bucket(group_id=2, name="B", parent_id=1, courses=[course(2, MISSING)])
        roots = build_bucket_tree([first, second])
        assert roots == [first, second]
        assert first.progress.percent == 100
        assert second.progress.percent == 0


def test_best_status_map_merges_trees():
    major = build_bucket_tree([Bucket(group_id=1, name="Major", courses=[course(1, DONE), course(2, MISSING)])])
    minor = build_bucket_tree([Bucket(group_id=2, name="Minor", courses=[course(1, MISSING), course(3, IN_PROGRESS)])])
    best = best_status_map(major)
    best_status_map(minor, into=best)
    assert {course_id: c.status for course_id, c in best.items()} == {1: DONE, 2: MISSING, 3: IN_PROGRESS}
