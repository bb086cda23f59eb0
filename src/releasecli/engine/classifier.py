"""History classification.

Walks a branch backwards from its tip and records, for every commit, the
version that first shipped it. On a stabilization branch the version tags
split the first-parent history into runs: walking back in time, a commit
belongs to the nearest tag at or after it, and commits newer than every tag
are cherry-picked but not yet released. Trunk carries no version tags, so
its commits come out as unreleased and the driver decides the rest.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Set

from ..models import ClassificationEntry, CommitRef, ReleaseStatus, Version, VersionTag
from .workspace import BranchView

log = logging.getLogger(__name__)


def walk(
    view: BranchView, until_commit: Optional[CommitRef], inclusive: bool = False
) -> Iterator[CommitRef]:
    """Yield commits from the tip down to until_commit or one of its ancestors."""
    history = view.history
    for commit in view.log():
        reached = until_commit is not None and history.is_ancestor(
            commit.hash, until_commit.hash
        )
        if reached and not inclusive:
            return
        yield commit
        if reached:
            return


def _versions_by_hash(tags: Iterable[VersionTag]) -> Dict[str, Version]:
    # the lowest version wins when several tags share a commit (RC1 and .0)
    by_hash: Dict[str, Version] = {}
    for tag in tags:
        current = by_hash.get(tag.commit.hash)
        if current is None or tag.version < current:
            by_hash[tag.commit.hash] = tag.version
    return by_hash


def classify(
    view: BranchView,
    until_commit: Optional[CommitRef],
    tags: Iterable[VersionTag] = (),
    inclusive: bool = False,
) -> List[ClassificationEntry]:
    """Classify the commits of a branch, newest first.

    Args:
        view: The checked-out branch to walk.
        until_commit: Stop at this commit or at any of its ancestors. None
            walks the whole branch.
        tags: Version tags of the branch. Empty for trunk.
        inclusive: Whether the stopping commit itself is classified.

    Returns:
        One entry per walked commit, newest first.
    """
    by_hash = _versions_by_hash(tags)
    has_tags = bool(by_hash)

    entries = []
    current_version: Optional[Version] = None
    for commit in walk(view, until_commit, inclusive):
        if commit.hash in by_hash:
            current_version = by_hash[commit.hash]

        if not has_tags:
            entry = ClassificationEntry(commit, ReleaseStatus.UNRELEASED)
        elif current_version is None:
            entry = ClassificationEntry(commit, ReleaseStatus.CHERRY_PICKED)
        else:
            entry = ClassificationEntry(commit, ReleaseStatus.RELEASED, current_version)

        if entry.reference_number is None:
            log.warning(f'unable to get PR ID from commit "{commit.title}"')
        entries.append(entry)

    return entries


def title_index(entries: Iterable[ClassificationEntry]) -> Dict[str, ClassificationEntry]:
    """Map titles to entries; the oldest entry wins for a repeated title."""
    index: Dict[str, ClassificationEntry] = {}
    for entry in entries:
        index[entry.title] = entry
    return index


def titles_of(
    view: BranchView, until_commit: Optional[CommitRef], inclusive: bool = True
) -> Set[str]:
    return {commit.title for commit in walk(view, until_commit, inclusive)}
