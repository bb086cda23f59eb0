"""Exclusive ownership of the checked-out branch.

A repository has one working tree, so reading "the history of branch X"
means checking X out first. ``Workspace.checkout`` hands out a
``BranchView``; taking another view invalidates the previous one, which
turns an interleaved read into an error instead of a silently wrong answer.
"""

import logging
from typing import Iterator, Optional

from ..errors import StaleCheckoutError
from ..models import CommitRef
from ..providers.base import HistoryProvider

log = logging.getLogger(__name__)


class BranchView:
    """Read access to one checked-out branch, valid until the next checkout."""

    def __init__(self, workspace: "Workspace", branch: str, generation: int):
        self._workspace = workspace
        self.branch = branch
        self._generation = generation

    @property
    def history(self) -> HistoryProvider:
        return self._workspace.history

    def is_current(self) -> bool:
        return self._workspace.generation == self._generation

    def ensure_current(self):
        if not self.is_current():
            raise StaleCheckoutError(
                f"branch '{self.branch}' is no longer checked out "
                f"(now '{self._workspace.branch}')"
            )

    def log(self) -> Iterator[CommitRef]:
        self.ensure_current()
        for commit in self.history.log():
            # the branch must not change under a running walk
            self.ensure_current()
            yield commit

    def parent_of(self, commit: CommitRef) -> Optional[CommitRef]:
        if commit.first_parent is None:
            return None
        return self.history.commit(commit.first_parent)

    def cherry_pick(self, commit: CommitRef) -> None:
        self.ensure_current()
        self.history.cherry_pick(commit.hash)

    def __repr__(self) -> str:
        return f"BranchView({self.branch!r})"


class Workspace:
    def __init__(self, history: HistoryProvider):
        self.history = history
        self.generation = 0
        self.branch: Optional[str] = None

    def checkout(self, branch: str) -> BranchView:
        if self.history.current_branch() != branch:
            log.debug(f"checkout {branch}")
            self.history.checkout(branch)
        self.generation += 1
        self.branch = branch
        return BranchView(self, branch, self.generation)
