"""Abstract collaborators consumed by the reconciliation engine.

The engine never talks to git or GitHub directly. It goes through a
``HistoryProvider`` (version-control backend) and a ``ForgeProvider``
(pull-request and label API), so both can be replaced in tests.

To add a new backend:
1. Subclass the provider ABC in a new module of this package
2. Translate backend failures into the typed errors of ``releasecli.errors``
3. Wire it up in ``AppContext``
"""

from abc import ABC, abstractmethod
from typing import Iterator, List, Optional

from ..models import CommitRef, Label, PullRequestInfo


class HistoryProvider(ABC):
    """Version-control backend.

    ``log()`` reads the currently checked-out branch, so callers must go
    through ``releasecli.engine.workspace.Workspace`` rather than calling
    ``checkout()`` and ``log()`` themselves.
    """

    @classmethod
    @abstractmethod
    def open(cls, path: str) -> "HistoryProvider":
        """Open the repository at path.

        Raises:
            NotARepositoryError: If path is not a repository.
        """
        pass

    @abstractmethod
    def checkout(self, branch: str) -> None:
        """Check out branch.

        Raises:
            NoSuchBranchError: If the branch does not exist.
            DirtyWorkingTreeError: If local changes prevent the checkout.
        """
        pass

    @abstractmethod
    def current_branch(self) -> Optional[str]:
        """Return the checked-out branch name, or None on a detached HEAD."""
        pass

    @abstractmethod
    def branch_exists(self, branch: str) -> bool:
        pass

    @abstractmethod
    def log(self) -> Iterator[CommitRef]:
        """Lazily walk first parents from HEAD, newest first.

        Every call starts a fresh walk.
        """
        pass

    @abstractmethod
    def commit(self, hash: str) -> CommitRef:
        """Look up a commit by hash.

        Raises:
            ObjectNotFoundError: If no such commit exists.
        """
        pass

    @abstractmethod
    def tag(self, name: str) -> CommitRef:
        """Resolve a lightweight or annotated tag to its commit.

        Raises:
            NoSuchTagError: If the tag does not exist.
        """
        pass

    @abstractmethod
    def tag_names(self) -> List[str]:
        pass

    @abstractmethod
    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        """True if ancestor is reachable from descendant (or is the same commit)."""
        pass

    @abstractmethod
    def cherry_pick(self, hash: str) -> None:
        """Cherry-pick a commit onto the checked-out branch.

        Raises:
            CherryPickConflictError: If the pick does not apply cleanly.
            ObjectNotFoundError: If the commit does not exist.
        """
        pass

    @abstractmethod
    def remote_url(self, name: str = "origin") -> str:
        pass


class ForgeProvider(ABC):
    """Pull-request and label API of one hosted repository."""

    @abstractmethod
    def get_pull_request(self, number: int) -> PullRequestInfo:
        """Raises ForgeNotFoundError or ForgeRateLimitError."""
        pass

    @abstractmethod
    def get_label(self, name: str) -> Label:
        """Raises ForgeNotFoundError if the label does not exist."""
        pass

    @abstractmethod
    def create_label(self, name: str, color: str) -> Label:
        pass

    @abstractmethod
    def add_label(self, pr_number: int, name: str) -> None:
        """Raises ForgeNotFoundError if the pull request does not exist."""
        pass
