"""Data model for release reconciliation.

Commits are identified across branches by their title (the first line of the
commit message), because cherry-picking rewrites the hash but keeps the
message. ``CommitRef`` equality therefore ignores ``hash`` entirely.

Example usage:
    commit = CommitRef.from_message("3f2a...", "Fix leak (#42)\\n\\nDetails", ts)
    commit.reference_number   # 42

    v = Version(1, 12, 0, "RC1")
    v < Version(1, 12, 0)     # True
    v.minor_prefix            # "1.12"
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, StrEnum
from functools import cached_property, total_ordering
from typing import Optional, Tuple, List

from packaging import version as pkg_version

from .descriptor import (
    extract_title,
    find_reference_number,
    format_pr_name,
    strip_reference,
)


@dataclass(frozen=True, eq=False)
class CommitRef:
    """Read-only projection of one commit.

    Attributes:
        hash: Backend identity of the commit (full SHA for git).
        title: First line of the commit message, trimmed.
        timestamp: Commit time.
        parent_hashes: Parent SHAs, the first one is the mainline parent.
    """

    hash: str
    title: str
    timestamp: Optional[datetime] = None
    parent_hashes: Tuple[str, ...] = ()

    @classmethod
    def from_message(
        cls,
        hash: str,
        message: str,
        timestamp: Optional[datetime] = None,
        parent_hashes: Tuple[str, ...] = (),
    ) -> "CommitRef":
        return cls(
            hash=hash,
            title=extract_title(message),
            timestamp=timestamp,
            parent_hashes=tuple(parent_hashes),
        )

    @property
    def reference_number(self) -> Optional[int]:
        return find_reference_number(self.title)

    @property
    def first_parent(self) -> Optional[str]:
        return self.parent_hashes[0] if self.parent_hashes else None

    @property
    def short_hash(self) -> str:
        return self.hash[:10]

    def __eq__(self, other) -> bool:
        if not isinstance(other, CommitRef):
            return NotImplemented
        return self.title == other.title

    def __hash__(self) -> int:
        return hash(self.title)

    def __repr__(self) -> str:
        return f"CommitRef({self.short_hash}, {self.title!r})"


@total_ordering
@dataclass(frozen=True)
class Version:
    """A release identifier ``major.minor.patch[-prerelease]``.

    Ordering is numeric on the triple and puts a prerelease before the
    release with the same triple: 1.11.6 < 1.12.0-RC1 < 1.12.0 < 1.12.1.

    Attributes:
        tag: Name of the git tag the version was read from, if any. Not part
            of equality.
    """

    major: int
    minor: int
    patch: int
    prerelease: Optional[str] = None
    tag: Optional[str] = field(default=None, compare=False)

    @cached_property
    def _precedence(self) -> pkg_version.Version:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        return pkg_version.Version(text)

    @property
    def is_released(self) -> bool:
        return not self.prerelease

    @property
    def minor_prefix(self) -> str:
        return f"{self.major}.{self.minor}"

    def __lt__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence < other._precedence

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        return f"{base}-{self.prerelease}" if self.prerelease else base


@dataclass(frozen=True)
class VersionTag:
    version: Version
    commit: CommitRef


@dataclass(frozen=True)
class ReconciliationWindow:
    """The pair of commits established as the same point in history."""

    source_branch: str
    target_branch: str
    source_diverge_commit: CommitRef
    target_diverge_commit: CommitRef


class ReleaseStatus(StrEnum):
    UNRELEASED = "unreleased"
    CHERRY_PICKED = "cherry-picked"
    RELEASED = "released"


@dataclass(frozen=True)
class ClassificationEntry:
    commit: CommitRef
    status: ReleaseStatus
    version: Optional[Version] = None

    @property
    def title(self) -> str:
        return self.commit.title

    @property
    def reference_number(self) -> Optional[int]:
        return self.commit.reference_number

    def describe_status(self) -> str:
        if self.status == ReleaseStatus.RELEASED and self.version is not None:
            return f"in {self.version}"
        return self.status.value


@dataclass
class ReleaseRow:
    """One line of a PR table."""

    reference: str
    number: int
    title: str
    age_days: int
    status: str
    commit_hash: str

    @classmethod
    def from_entry(
        cls, entry: ClassificationEntry, owner: str, repo: str, now: datetime
    ) -> "ReleaseRow":
        commit = entry.commit
        age = (now - commit.timestamp).days if commit.timestamp else 0
        return cls(
            reference=format_pr_name(owner, repo, entry.reference_number),
            number=entry.reference_number,
            title=strip_reference(commit.title),
            age_days=age,
            status=entry.describe_status(),
            commit_hash=commit.hash,
        )

    def to_dict(self) -> dict:
        return {
            "reference": self.reference,
            "number": self.number,
            "title": self.title,
            "age_days": self.age_days,
            "status": self.status,
            "commit": self.commit_hash,
        }


class PortOutcome(str, Enum):
    PENDING = "pending"
    SKIPPED = "skipped"
    APPLIED = "applied"
    FAILED = "failed"


@dataclass
class PortResult:
    commit: CommitRef
    outcome: PortOutcome = PortOutcome.PENDING
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "commit": self.commit.hash,
            "title": self.commit.title,
            "number": self.commit.reference_number,
            "outcome": self.outcome.value,
            "reason": self.reason,
        }


@dataclass
class PortBatch:
    """Ordered per-commit results of one port operation.

    Once a commit fails the batch is aborted and every later commit stays
    ``PENDING``.
    """

    results: List[PortResult] = field(default_factory=list)
    aborted: bool = False

    def by_outcome(self, outcome: PortOutcome) -> List[PortResult]:
        return [r for r in self.results if r.outcome == outcome]

    @property
    def applied(self) -> List[PortResult]:
        return self.by_outcome(PortOutcome.APPLIED)

    @property
    def skipped(self) -> List[PortResult]:
        return self.by_outcome(PortOutcome.SKIPPED)

    @property
    def failed(self) -> List[PortResult]:
        return self.by_outcome(PortOutcome.FAILED)

    @property
    def pending(self) -> List[PortResult]:
        return self.by_outcome(PortOutcome.PENDING)


@dataclass(frozen=True)
class Label:
    name: str


@dataclass(frozen=True)
class PullRequestInfo:
    number: int
    title: str
    merge_commit_hash: Optional[str]
    merged_at: Optional[datetime] = None
    labels: Tuple[str, ...] = ()

    def has_label_with_prefix(self, prefix: str) -> bool:
        return any(name.startswith(prefix) for name in self.labels)
