from datetime import datetime, timezone

import pytest

from releasecli.engine.driver import (
    ReconciliationDriver,
    ReleaseQuery,
    is_present,
    is_released_at,
    shipped_in,
)
from releasecli.engine.versions import VersionResolver
from releasecli.engine.workspace import Workspace
from releasecli.errors import DivergencePointNotFoundError, NoSuchBranchError
from releasecli.models import ClassificationEntry, ReleaseStatus, Version


NOW = datetime(2024, 1, 11, tzinfo=timezone.utc)


def make_driver(history, **kwargs) -> ReconciliationDriver:
    query = ReleaseQuery(owner="apache", repo="incubator-pegasus", now=NOW, **kwargs)
    return ReconciliationDriver(Workspace(history), VersionResolver(history), query)


def _summary(entries):
    return [(e.reference_number, e.describe_status()) for e in entries]


@pytest.fixture
def two_minor_repo(released_repo):
    """Adds a v1.13 branch; #15 is picked into both v1.12 and v1.13.

    trunk:  ... - #14 - #15 - #16
    v1.12:  ... - #13 - #15
    v1.13:  #14 (v1.13.0-RC1) - #15 - #16 (v1.13.0)
    """
    h = released_repo
    c14 = h.commits["c0005"]
    h.commit_on("master", "Fix deadlock (#15)", days=7)
    h.commit_on("master", "Add option (#16)", days=8)
    h.commit_on("v1.12", "Fix deadlock (#15)", days=9)

    h.create_branch("v1.13", c14)
    h.add_tag("v1.13.0-RC1", c14)
    h.commit_on("v1.13", "Fix deadlock (#15)", days=9)
    c16 = h.commit_on("v1.13", "Add option (#16)", days=9)
    h.add_tag("v1.13.0", c16)
    return h


class TestIsReleasedAt:
    def test_released_at_or_before_baseline(self, released_repo):
        entry = ClassificationEntry(
            released_repo.commits["c0006"], ReleaseStatus.RELEASED, Version(1, 12, 1)
        )
        assert is_released_at(entry, Version(1, 12, 1))
        assert is_released_at(entry, Version(1, 12, 2))
        assert not is_released_at(entry, Version(1, 12, 0))

    def test_prerelease_baseline_gates_nothing(self, released_repo):
        entry = ClassificationEntry(
            released_repo.commits["c0001"], ReleaseStatus.RELEASED, Version(1, 12, 0, "RC1")
        )
        assert not is_released_at(entry, Version(1, 12, 0, "RC2"))
        assert is_released_at(entry, Version(1, 12, 0))

    def test_cherry_picked_is_never_released(self, released_repo):
        entry = ClassificationEntry(released_repo.commits["c0007"], ReleaseStatus.CHERRY_PICKED)
        assert not is_released_at(entry, Version(1, 12, 1))


class TestUnreleasedInBranch:
    def test_only_unported_commit_is_unreleased(self, history):
        history.create_branch("master")
        c1 = history.commit_on("master", "First (#10)")
        history.commit_on("master", "Second (#11)")
        history.commit_on("master", "Third (#12)")
        history.create_branch("v1.0", c1)
        history.add_tag("v1.0.0", c1)
        history.commit_on("v1.0", "Third (#12)")
        history.current = "master"

        entries = make_driver(history).unreleased_in_branch(Version(1, 0, 0))

        unported = [e.reference_number for e in entries if e.status == ReleaseStatus.UNRELEASED]
        assert unported == [11]
        assert _summary(entries) == [(12, "cherry-picked"), (11, "unreleased")]

    def test_released_commits_are_gated(self, released_repo):
        entries = make_driver(released_repo).unreleased_in_branch(Version(1, 12, 1))
        assert _summary(entries) == [
            (14, "unreleased"),
            (13, "cherry-picked"),
            (11, "unreleased"),
        ]

    def test_later_release_is_reported(self, released_repo):
        entries = make_driver(released_repo).unreleased_in_branch(Version(1, 12, 0))
        assert _summary(entries) == [
            (14, "unreleased"),
            (13, "cherry-picked"),
            (12, "in 1.12.1"),
            (11, "unreleased"),
        ]

    def test_prerelease_baseline_reports_everything_after_cut(self, released_repo):
        entries = make_driver(released_repo).unreleased_in_branch(Version(1, 12, 0, "RC1"))
        assert [e.reference_number for e in entries] == [14, 13, 12, 11]

    def test_rows(self, released_repo):
        driver = make_driver(released_repo)
        rows = driver.to_rows(driver.unreleased_in_branch(Version(1, 12, 1)))

        assert [row.reference for row in rows] == [
            "apache/incubator-pegasus#14",
            "apache/incubator-pegasus#13",
            "apache/incubator-pegasus#11",
        ]
        assert rows[0].title == "Refactor rpc"
        assert rows[0].age_days == 6
        assert rows[2].to_dict()["status"] == "unreleased"

    def test_rows_skip_commits_without_reference(self, released_repo):
        released_repo.commit_on("master", "Bump version")
        driver = make_driver(released_repo)
        entries = driver.unreleased_in_branch(Version(1, 12, 1))

        assert entries[0].title == "Bump version"
        assert [row.number for row in driver.to_rows(entries)] == [14, 13, 11]

    def test_unknown_minor_version(self, released_repo):
        with pytest.raises(NoSuchBranchError):
            make_driver(released_repo).unreleased_in_branch(Version(2, 0, 0))

    def test_divergence_bound_from_query(self, history):
        history.create_branch("master")
        base = history.commit_on("master", "Base (#1)")
        history.create_branch("v1.0", base)
        history.add_tag("v1.0.0-RC1", base)
        cut = history.commit_on("v1.0", "Squashed cut")
        history.add_tag("v1.0.0", cut)
        history.current = "master"

        # the RC1 tag commit is on trunk, the search starts there
        assert make_driver(history, max_divergence_steps=0).unreleased_in_branch(Version(1, 0, 0)) == []

        history.tags.pop("v1.0.0-RC1")
        with pytest.raises(DivergencePointNotFoundError):
            make_driver(history, max_divergence_steps=0).unreleased_in_branch(Version(1, 0, 0))
        assert make_driver(history, max_divergence_steps=1).unreleased_in_branch(Version(1, 0, 0)) == []


class TestPickedForRelease:
    def test_same_minor(self, released_repo):
        entries = make_driver(released_repo).picked_for_release(
            Version(1, 12, 1), Version(1, 12, 0)
        )
        assert _summary(entries) == [(13, "cherry-picked"), (12, "in 1.12.1")]

    def test_new_minor_excludes_previous_branch(self, two_minor_repo):
        entries = make_driver(two_minor_repo).picked_for_release(
            Version(1, 13, 0), Version(1, 12, 1)
        )
        assert _summary(entries) == [(16, "in 1.13.0")]

    def test_first_minor_without_baseline(self, released_repo):
        entries = make_driver(released_repo).picked_for_release(Version(1, 12, 0), None)
        assert [e.reference_number for e in entries] == [13, 12]


def test_is_present(released_repo):
    view = Workspace(released_repo).checkout("v1.12")
    assert is_present(view, released_repo.commits["c0003"])
    assert not is_present(view, released_repo.commits["c0002"])


def test_shipped_in_drops_commits_picked_after_the_tag(released_repo):
    c17 = released_repo.commit_on("v1.12", "Fix overflow (#17)")
    released_repo.add_tag("v1.12.2", c17)
    released_repo.commit_on("v1.12", "Fix typo (#18)")

    entries = make_driver(released_repo).picked_for_release(Version(1, 12, 1), Version(1, 12, 0))
    assert _summary(entries) == [
        (18, "cherry-picked"),
        (17, "in 1.12.2"),
        (13, "in 1.12.2"),
        (12, "in 1.12.1"),
    ]
    assert _summary(shipped_in(entries, Version(1, 12, 1))) == [(12, "in 1.12.1")]


def test_shipped_in_keeps_own_prereleases(two_minor_repo):
    two_minor_repo.add_tag("v1.13.0-RC2", two_minor_repo.commits["c0012"])

    entries = make_driver(two_minor_repo).picked_for_release(Version(1, 13, 0), Version(1, 12, 1))
    assert _summary(entries) == [(16, "in 1.13.0-RC2")]
    assert _summary(shipped_in(entries, Version(1, 13, 0))) == [(16, "in 1.13.0-RC2")]
