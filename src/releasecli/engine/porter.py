"""Port execution: cherry-pick a batch of commits onto a branch.

Each commit goes ``PENDING -> SKIPPED | APPLIED | FAILED``. The first
failure (a conflict or a missing commit) aborts the batch, so
later commits are left ``PENDING`` and commits applied earlier are kept.
"""

import logging
from typing import Iterable, List

from ..errors import CherryPickConflictError, ObjectNotFoundError
from ..models import CommitRef, PortBatch, PortOutcome, PortResult
from ..utils.git_utils import short_sha
from .driver import is_present
from .workspace import BranchView

log = logging.getLogger(__name__)


def port_order(commits: Iterable[CommitRef]) -> List[CommitRef]:
    """Deduplicate by title and sort ascending by reference number."""
    unique = {}
    for commit in commits:
        unique.setdefault(commit.title, commit)
    # commits without a reference number keep their relative order, last
    return sorted(
        unique.values(),
        key=lambda c: (c.reference_number is None, c.reference_number or 0),
    )


def port(view: BranchView, commits: Iterable[CommitRef]) -> PortBatch:
    batch = PortBatch(results=[PortResult(commit) for commit in port_order(commits)])

    for result in batch.results:
        commit = result.commit
        if is_present(view, commit):
            result.outcome = PortOutcome.SKIPPED
            result.reason = "already present"
            log.info(f'ignore "{commit.title}" since it has been cherry-picked')
            continue

        try:
            view.cherry_pick(commit)
        except (CherryPickConflictError, ObjectNotFoundError) as e:
            result.outcome = PortOutcome.FAILED
            result.reason = e.message
            batch.aborted = True
            log.error(f"cherry-pick of {short_sha(commit.hash)} failed, stop processing")
            break

        result.outcome = PortOutcome.APPLIED
        log.info(f'cherry-picked {short_sha(commit.hash)} "{commit.title}" onto {view.branch}')

    return batch
