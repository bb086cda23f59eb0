import itertools
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterator, List, Optional, Set

import pytest

from releasecli.errors import (
    CherryPickConflictError,
    ForgeNotFoundError,
    NoSuchBranchError,
    NoSuchTagError,
    ObjectNotFoundError,
    ResolutionError,
)
from releasecli.models import CommitRef, Label, PullRequestInfo
from releasecli.providers.base import ForgeProvider, HistoryProvider

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeHistoryProvider(HistoryProvider):
    """In-memory commit graph with branches, tags and a current branch.

    Hashes are generated ("c0001", "c0002", ...); titles are what tests
    reason about.
    """

    def __init__(self, remote_url: str = "git@github.com:apache/incubator-pegasus.git"):
        self.commits: Dict[str, CommitRef] = {}
        self.branches: Dict[str, Optional[str]] = {}
        self.tags: Dict[str, str] = {}
        self.current: Optional[str] = None
        self.conflicts: Set[str] = set()
        self.checkouts: List[str] = []
        self.picked: List[str] = []
        self.url = remote_url
        self._ids = itertools.count(1)

    @classmethod
    def open(cls, path: str) -> "FakeHistoryProvider":
        return cls()

    # graph construction

    def new_commit(self, title: str, parents=(), days: int = 0) -> CommitRef:
        hash = f"c{next(self._ids):04d}"
        commit = CommitRef.from_message(
            hash, f"{title}\n\nbody", EPOCH + timedelta(days=days), tuple(parents)
        )
        self.commits[hash] = commit
        return commit

    def create_branch(self, name: str, at: Optional[CommitRef] = None):
        self.branches[name] = at.hash if at else None
        if self.current is None:
            self.current = name

    def commit_on(self, branch: str, title: str, days: int = 0) -> CommitRef:
        tip = self.branches[branch]
        commit = self.new_commit(title, (tip,) if tip else (), days)
        self.branches[branch] = commit.hash
        return commit

    def add_tag(self, name: str, commit: CommitRef):
        self.tags[name] = commit.hash

    # HistoryProvider

    def checkout(self, branch: str) -> None:
        if branch not in self.branches:
            raise NoSuchBranchError(f"invalid branch '{branch}'")
        self.checkouts.append(branch)
        self.current = branch

    def current_branch(self) -> Optional[str]:
        return self.current

    def branch_exists(self, branch: str) -> bool:
        return branch in self.branches

    def log(self) -> Iterator[CommitRef]:
        hash = self.branches[self.current]
        while hash is not None:
            commit = self.commits[hash]
            yield commit
            hash = commit.first_parent

    def commit(self, hash: str) -> CommitRef:
        if hash not in self.commits:
            raise ObjectNotFoundError(f"no such commit: {hash}")
        return self.commits[hash]

    def tag(self, name: str) -> CommitRef:
        if name not in self.tags:
            raise NoSuchTagError(f"no such version tag: {name}")
        return self.commits[self.tags[name]]

    def tag_names(self) -> List[str]:
        return list(self.tags)

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        pending = [descendant]
        seen = set()
        while pending:
            hash = pending.pop()
            if hash == ancestor:
                return True
            if hash in seen:
                continue
            seen.add(hash)
            pending.extend(self.commits[hash].parent_hashes)
        return False

    def cherry_pick(self, hash: str) -> None:
        source = self.commit(hash)
        if hash in self.conflicts:
            raise CherryPickConflictError(f"failed to cherry-pick {hash[:10]}: conflict")
        tip = self.branches[self.current]
        copy = self.new_commit(source.title, (tip,) if tip else ())
        self.branches[self.current] = copy.hash
        self.picked.append(hash)

    def remote_url(self, name: str = "origin") -> str:
        if name != "origin":
            raise ResolutionError(f"no remote named '{name}'")
        return self.url


class FakeForge(ForgeProvider):
    def __init__(self):
        self.pulls: Dict[int, PullRequestInfo] = {}
        self.labels: Dict[str, Label] = {}
        self.created: List[str] = []
        self.added: List[tuple] = []

    def add_pull(self, number: int, merge_commit_hash: Optional[str], labels=(), title=None):
        self.pulls[number] = PullRequestInfo(
            number=number,
            title=title or f"PR {number}",
            merge_commit_hash=merge_commit_hash,
            labels=tuple(labels),
        )

    def get_pull_request(self, number: int) -> PullRequestInfo:
        if number not in self.pulls:
            raise ForgeNotFoundError(f"get pull request #{number}: not found (404)")
        return self.pulls[number]

    def get_label(self, name: str) -> Label:
        if name not in self.labels:
            raise ForgeNotFoundError(f"get label '{name}': not found (404)")
        return self.labels[name]

    def create_label(self, name: str, color: str) -> Label:
        self.created.append(name)
        self.labels[name] = Label(name)
        return self.labels[name]

    def add_label(self, pr_number: int, name: str) -> None:
        self.get_pull_request(pr_number)
        self.added.append((pr_number, name))


@pytest.fixture
def history():
    return FakeHistoryProvider()


@pytest.fixture
def forge():
    return FakeForge()


@pytest.fixture
def released_repo(history):
    """Trunk with a v1.12 branch cut at #10 and two later releases.

    trunk:  #10 - #11 - #12 - #13 - #14
    v1.12:  #10 (v1.12.0-RC1, v1.12.0) - #12 (v1.12.1) - #13
    """
    history.create_branch("master")
    c10 = history.commit_on("master", "Init release pipeline (#10)", days=0)
    history.commit_on("master", "Add metrics (#11)", days=1)
    history.commit_on("master", "Fix leak (#12)", days=2)
    history.commit_on("master", "Fix crash (#13)", days=3)
    history.commit_on("master", "Refactor rpc (#14)", days=4)

    history.create_branch("v1.12", c10)
    history.add_tag("v1.12.0-RC1", c10)
    history.add_tag("v1.12.0", c10)
    p12 = history.commit_on("v1.12", "Fix leak (#12)", days=5)
    history.add_tag("v1.12.1", p12)
    history.commit_on("v1.12", "Fix crash (#13)", days=6)
    history.add_tag("not-a-version", c10)

    history.current = "master"
    return history
