"""Tag/version resolution.

Release tags follow the ``v<major>.<minor>.<patch>[-<prerelease>]``
convention (``v1.12.0-RC1``, ``v1.12.0``, ``v1.12.1``) and every minor
version has a stabilization branch ``v<major>.<minor>`` cut from trunk at its
first tag.
"""

import logging
import re
from typing import List, Optional

from packaging import version as pkg_version

from ..errors import (
    InvalidVersionError,
    NoReleasedVersionError,
    NoSuchBranchError,
    NoSuchTagError,
)
from ..models import CommitRef, Version, VersionTag
from ..providers.base import HistoryProvider

log = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:-([A-Za-z][0-9A-Za-z.]*))?$")


def parse_version(text: str, tag_prefix: str = "v", tag: Optional[str] = None) -> Version:
    """Parse ``1.12.1``, ``v1.12.1`` or ``1.12.0-RC1``.

    Args:
        text: The version string, with or without the tag prefix.
        tag_prefix: Prefix stripped from the front of text if present.
        tag: Name of the tag the text came from, recorded on the Version.

    Raises:
        InvalidVersionError: If text is not a three-component version.
    """
    raw = text.strip()
    if tag_prefix and raw.startswith(tag_prefix):
        raw = raw[len(tag_prefix) :]

    match = VERSION_PATTERN.match(raw)
    if match is None:
        raise InvalidVersionError(f"invalid version: {text}")

    major, minor, patch, prerelease = match.groups()
    result = Version(int(major), int(minor), int(patch), prerelease, tag=tag)
    # precedence is delegated to packaging, which must read the suffix as a
    # prerelease ("RC1", "beta2"), not as a post or local release
    try:
        precedence = pkg_version.Version(str(result))
    except pkg_version.InvalidVersion:
        raise InvalidVersionError(f"invalid version: {text}")
    if prerelease and not precedence.is_prerelease:
        raise InvalidVersionError(f"invalid prerelease in version: {text}")
    return result


def parse_minor_prefix(text: str, tag_prefix: str = "v") -> str:
    """Normalize ``1.12``, ``v1.12`` or a full version to ``"1.12"``."""
    raw = text.strip()
    if tag_prefix and raw.startswith(tag_prefix):
        raw = raw[len(tag_prefix) :]
    parts = raw.split(".")
    if len(parts) < 2 or not parts[0].isdigit() or not parts[1].isdigit():
        raise InvalidVersionError(f"invalid minor version: {text}")
    return f"{int(parts[0])}.{int(parts[1])}"


class VersionResolver:
    def __init__(
        self, history: HistoryProvider, tag_prefix: str = "v", branch_prefix: str = "v"
    ):
        self.history = history
        self.tag_prefix = tag_prefix
        self.branch_prefix = branch_prefix

    def list_versions(self, prefix: Optional[str] = None) -> List[Version]:
        """All version tags, ascending, optionally only those of one minor version."""
        if prefix is not None:
            prefix = parse_minor_prefix(prefix, self.tag_prefix)

        versions = []
        for name in self.history.tag_names():
            try:
                v = parse_version(name, self.tag_prefix, tag=name)
            except InvalidVersionError:
                log.debug(f"ignore tag '{name}': not a version")
                continue
            if prefix is None or v.minor_prefix == prefix:
                versions.append(v)
        return sorted(versions)

    def latest_version(self) -> Version:
        versions = self.list_versions()
        if not versions:
            raise NoReleasedVersionError("the repository has no version tags")
        return versions[-1]

    def latest_released_version(self) -> Version:
        released = [v for v in self.list_versions() if v.is_released]
        if not released:
            raise NoReleasedVersionError("the repository has never tagged a release")
        return released[-1]

    def previous_released_version(self, version: Version) -> Optional[Version]:
        released = [v for v in self.list_versions() if v.is_released and v < version]
        return released[-1] if released else None

    def initial_version_of_branch(self, prefix: str) -> Version:
        """The lowest version under prefix, i.e. where the branch was cut."""
        versions = self.list_versions(prefix)
        if not versions:
            raise NoSuchBranchError(f"no version tags for minor version {prefix}")
        return versions[0]

    def branch_name_for(self, version: Version) -> str:
        return f"{self.branch_prefix}{version.minor_prefix}"

    def tag_name_for(self, version: Version) -> str:
        if version.tag:
            return version.tag
        for v in self.list_versions(version.minor_prefix):
            if v == version:
                return v.tag
        return f"{self.tag_prefix}{version}"

    def commit_for(self, version: Version) -> CommitRef:
        name = self.tag_name_for(version)
        try:
            return self.history.tag(name)
        except NoSuchTagError:
            raise NoSuchTagError(f"no such version tag: {name}")

    def version_tags(self, prefix: str) -> List[VersionTag]:
        return [VersionTag(v, self.commit_for(v)) for v in self.list_versions(prefix)]
