"""Reconciliation queries.

Answers the three questions the commands ask:

- which trunk commits are not yet released at a given version of a
  stabilization branch (``unreleased_in_branch``),
- which commits were picked into the branch for an upcoming release
  (``picked_for_release``),
- whether a commit is already present on a branch (``is_present``).

Every query recomputes from live history and aborts on the first
resolution error.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Set

from ..models import (
    ClassificationEntry,
    CommitRef,
    ReconciliationWindow,
    ReleaseRow,
    ReleaseStatus,
    Version,
)
from .classifier import classify, title_index, titles_of, walk
from .divergence import DEFAULT_MAX_DIVERGENCE_STEPS, find_by_title, locate
from .versions import VersionResolver
from .workspace import BranchView, Workspace

log = logging.getLogger(__name__)


@dataclass
class ReleaseQuery:
    """Parameters shared by the reconciliation queries.

    Attributes:
        trunk: Name of the trunk branch.
        owner: Owner of the hosted repository, used in PR references.
        repo: Name of the hosted repository.
        max_divergence_steps: Bound of the backward divergence search.
        now: Reference time for commit ages.
    """

    trunk: str = "master"
    owner: str = ""
    repo: str = ""
    max_divergence_steps: int = DEFAULT_MAX_DIVERGENCE_STEPS
    now: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


def is_released_at(entry: ClassificationEntry, baseline: Version) -> bool:
    """Whether baseline already ships the commit of entry.

    Prerelease versions never count as released: with a prerelease baseline
    nothing is gated out.
    """
    if not baseline.is_released:
        return False
    return (
        entry.status == ReleaseStatus.RELEASED
        and entry.version is not None
        and entry.version <= baseline
    )


def shipped_in(
    entries: List[ClassificationEntry], version: Version
) -> List[ClassificationEntry]:
    """Keep the entries that version ships.

    ``picked_for_release`` walks up to the branch tip, so it also returns
    commits picked after version's tag (cherry-picked, or released in a
    later patch). Entries of version's own prereleases are kept.
    """
    return [
        entry
        for entry in entries
        if entry.status == ReleaseStatus.RELEASED
        and entry.version is not None
        and entry.version <= version
    ]


def is_present(view: BranchView, commit: CommitRef) -> bool:
    return find_by_title(view, commit.title) is not None


class ReconciliationDriver:
    def __init__(self, workspace: Workspace, resolver: VersionResolver, query: ReleaseQuery):
        self.workspace = workspace
        self.resolver = resolver
        self.query = query

    def window(self, branch: str, start_commit: CommitRef) -> ReconciliationWindow:
        """Establish where branch diverged from trunk, starting at start_commit."""
        branch_view = self.workspace.checkout(branch)
        trunk_view = self.workspace.checkout(self.query.trunk)
        on_branch, on_trunk = locate(
            branch_view, trunk_view, start_commit, self.query.max_divergence_steps
        )
        return ReconciliationWindow(
            source_branch=self.query.trunk,
            target_branch=branch,
            source_diverge_commit=on_trunk,
            target_diverge_commit=on_branch,
        )

    def unreleased_in_branch(self, baseline: Version) -> List[ClassificationEntry]:
        """Trunk commits that are not released at baseline, newest first.

        A commit absent from the stabilization branch comes out as
        ``UNRELEASED``; one that was picked but ships only after baseline
        keeps the branch's classification (cherry-picked or released in a
        later version).
        """
        prefix = baseline.minor_prefix
        branch = self.resolver.branch_name_for(baseline)
        initial = self.resolver.initial_version_of_branch(prefix)
        start = self.resolver.commit_for(initial)
        tags = self.resolver.version_tags(prefix)

        window = self.window(branch, start)

        # the number of commits in a release branch is limited, no worry for memory
        branch_view = self.workspace.checkout(branch)
        index = title_index(classify(branch_view, window.target_diverge_commit, tags))

        trunk_view = self.workspace.checkout(self.query.trunk)
        entries = []
        for commit in walk(trunk_view, window.source_diverge_commit):
            picked = index.get(commit.title)
            if picked is None:
                entry = ClassificationEntry(commit, ReleaseStatus.UNRELEASED)
            elif is_released_at(picked, baseline):
                continue
            else:
                entry = ClassificationEntry(commit, picked.status, picked.version)

            if entry.reference_number is None:
                log.warning(f'unable to get PR ID from commit "{commit.title}"')
            entries.append(entry)
        return entries

    def _previous_minor_prefix(self, version: Version) -> Optional[str]:
        current = (version.major, version.minor)
        older = [
            v for v in self.resolver.list_versions() if (v.major, v.minor) < current
        ]
        return max(older).minor_prefix if older else None

    def _titles_of_minor(self, prefix: str) -> Set[str]:
        initial = self.resolver.initial_version_of_branch(prefix)
        start = self.resolver.commit_for(initial)
        view = self.workspace.checkout(self.resolver.branch_name_for(initial))
        return titles_of(view, start, inclusive=True)

    def picked_for_release(
        self, version: Version, baseline: Optional[Version]
    ) -> List[ClassificationEntry]:
        """Commits picked into version's branch since baseline, newest first.

        When baseline belongs to the same minor version this is everything
        after the baseline tag. For a new minor version it is everything after
        the branch's initial tag, minus what the previous minor version's
        branch already carries.
        """
        prefix = version.minor_prefix
        branch = self.resolver.branch_name_for(version)
        tags = self.resolver.version_tags(prefix)

        if baseline is not None and baseline.minor_prefix == prefix:
            stop = self.resolver.commit_for(baseline)
            log.info(f"collecting commits on {branch} after {baseline}")
            view = self.workspace.checkout(branch)
            return classify(view, stop, tags)

        initial = self.resolver.initial_version_of_branch(prefix)
        stop = self.resolver.commit_for(initial)

        previous_titles: Set[str] = set()
        previous_prefix = self._previous_minor_prefix(version)
        if previous_prefix is not None:
            log.info(f"excluding commits already picked into {previous_prefix}")
            previous_titles = self._titles_of_minor(previous_prefix)

        log.info(f"collecting commits on {branch} after {initial}")
        view = self.workspace.checkout(branch)
        return [
            entry
            for entry in classify(view, stop, tags)
            if entry.title not in previous_titles
        ]

    def to_rows(self, entries: List[ClassificationEntry]) -> List[ReleaseRow]:
        """PR table rows; entries without a reference number are left out."""
        return [
            ReleaseRow.from_entry(entry, self.query.owner, self.query.repo, self.query.now)
            for entry in entries
            if entry.reference_number is not None
        ]
