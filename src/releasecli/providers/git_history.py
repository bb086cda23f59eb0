"""GitPython implementation of the history provider."""

import logging
from typing import Iterator, List, Optional

import git
from git import Commit, Repo
from git.exc import BadName, BadObject, GitCommandError

from ..errors import (
    CherryPickConflictError,
    DirtyWorkingTreeError,
    NoSuchBranchError,
    NoSuchTagError,
    NotARepositoryError,
    ObjectNotFoundError,
    ResolutionError,
)
from ..models import CommitRef
from ..utils.git_utils import short_sha
from .base import HistoryProvider

log = logging.getLogger(__name__)


def commit_to_ref(commit: Commit) -> CommitRef:
    message = commit.message
    if isinstance(message, bytes):
        message = message.decode("utf-8", errors="replace")
    return CommitRef.from_message(
        hash=commit.hexsha,
        message=message,
        timestamp=commit.committed_datetime,
        parent_hashes=tuple(p.hexsha for p in commit.parents),
    )


class GitHistoryProvider(HistoryProvider):
    def __init__(self, repo: Repo):
        self.repo = repo

    @classmethod
    def open(cls, path: str) -> "GitHistoryProvider":
        try:
            return cls(git.Repo(path))
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise NotARepositoryError(f"cannot open repo '{path}': {e}")

    def current_branch(self) -> Optional[str]:
        try:
            return self.repo.active_branch.name
        except TypeError:
            # Detached HEAD state
            return None

    def branch_exists(self, branch: str) -> bool:
        for ref in (f"refs/heads/{branch}", f"refs/remotes/origin/{branch}"):
            try:
                self.repo.git.rev_parse("--verify", "--quiet", ref)
                return True
            except GitCommandError:
                continue
        return False

    def checkout(self, branch: str) -> None:
        if not self.branch_exists(branch):
            raise NoSuchBranchError(f"invalid branch '{branch}'")
        if self.repo.is_dirty(untracked_files=False):
            raise DirtyWorkingTreeError(
                f"cannot checkout '{branch}': the working tree has local changes"
            )
        try:
            # For remote-only branches git creates the tracking branch itself.
            self.repo.git.checkout(branch)
        except GitCommandError as e:
            raise NoSuchBranchError(f"failed to checkout '{branch}': {e.stderr.strip()}")
        log.debug(f"checked out {branch}")

    def log(self) -> Iterator[CommitRef]:
        for commit in self.repo.iter_commits("HEAD", first_parent=True):
            yield commit_to_ref(commit)

    def _get_commit(self, hash: str) -> Commit:
        try:
            commit = self.repo.commit(hash)
            # a full sha is not looked up until the object is read
            commit.message
            return commit
        except (BadName, BadObject, ValueError) as e:
            raise ObjectNotFoundError(f"no such commit: {hash} ({e})")

    def commit(self, hash: str) -> CommitRef:
        return commit_to_ref(self._get_commit(hash))

    def tag(self, name: str) -> CommitRef:
        try:
            tag_ref = self.repo.tags[name]
        except IndexError:
            raise NoSuchTagError(f"no such version tag: {name}")
        # TagReference.commit dereferences annotated tag objects
        return commit_to_ref(tag_ref.commit)

    def tag_names(self) -> List[str]:
        return [tag.name for tag in self.repo.tags]

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        return self.repo.is_ancestor(ancestor, descendant)

    def cherry_pick(self, hash: str) -> None:
        commit = self._get_commit(hash)
        args = []
        if len(commit.parents) > 1:
            # merged through a merge commit: replay it against the mainline
            args += ["-m", "1"]
        try:
            self.repo.git.cherry_pick(*args, commit.hexsha)
        except GitCommandError as e:
            self._abort_cherry_pick()
            raise CherryPickConflictError(
                f"failed to cherry-pick {short_sha(commit.hexsha)}: {e.stderr.strip()}"
            )

    def _abort_cherry_pick(self):
        try:
            self.repo.git.cherry_pick("--abort")
        except GitCommandError as e:
            log.warning(f"Failed to abort cherry-pick: {e.stderr.strip()}")

    def remote_url(self, name: str = "origin") -> str:
        try:
            remote = self.repo.remote(name)
        except ValueError:
            raise ResolutionError(f"no remote named '{name}'")
        for url in remote.urls:
            return url
        raise ResolutionError(f"remote '{name}' has no URL")
