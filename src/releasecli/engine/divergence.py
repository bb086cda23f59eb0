"""Divergence point search and the title matching primitive.

Cherry-picks rewrite hashes, so "the same commit on another branch" means
"a commit with the same title". The commit a stabilization branch was cut
at is normally present on trunk verbatim, but squashes or rebases around
the cut can drop it; the search then falls back to first parents, a bounded
number of times.
"""

import logging
from typing import Optional, Tuple

from ..errors import DivergencePointNotFoundError
from ..models import CommitRef
from ..utils.git_utils import short_sha
from .workspace import BranchView

log = logging.getLogger(__name__)

DEFAULT_MAX_DIVERGENCE_STEPS = 10


def find_by_title(view: BranchView, title: str) -> Optional[CommitRef]:
    """Return the newest commit on the branch whose title equals title."""
    for commit in view.log():
        if commit.title == title:
            return commit
    return None


def locate(
    view_a: BranchView,
    view_b: BranchView,
    start_commit: CommitRef,
    max_steps: int = DEFAULT_MAX_DIVERGENCE_STEPS,
) -> Tuple[CommitRef, CommitRef]:
    """Find the commit pair that is the same point in history on both branches.

    Args:
        view_a: The branch start_commit belongs to. Only used to look up
            parents, so it need not be the checked-out branch.
        view_b: The branch searched for a title-equal commit. Must be current.
        start_commit: First candidate, usually the branch's initial tag commit.
        max_steps: How many times to step back to a parent before giving up.

    Returns:
        (commit on A, commit on B).

    Raises:
        DivergencePointNotFoundError: If no candidate within max_steps parents
            has a counterpart on B.
    """
    candidate = start_commit
    steps = 0
    while True:
        counterpart = find_by_title(view_b, candidate.title)
        if counterpart is not None:
            log.info(f'start scanning from commit "{candidate.title}"')
            log.info(
                f"commit-sha is {short_sha(candidate.hash)} in {view_a.branch}, "
                f"{short_sha(counterpart.hash)} in {view_b.branch}"
            )
            return candidate, counterpart

        if steps >= max_steps:
            raise DivergencePointNotFoundError(
                f"stop. unable to find the equal commits both in "
                f"{view_b.branch} and {view_a.branch} after {max_steps} steps"
            )

        log.info(
            f'commit "{candidate.title}" does not appear in {view_b.branch}, '
            f"use its parent instead"
        )
        parent = view_a.parent_of(candidate)
        if parent is None:
            raise DivergencePointNotFoundError(
                f"unable to find parent for commit: {candidate.hash}"
            )
        candidate = parent
        steps += 1
