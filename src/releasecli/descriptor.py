"""Commit title and pull-request reference extraction.

A squash-merged pull request produces a commit whose title ends with the
PR number, e.g. ``"Fix (temp) thing (#42)"``. Only the last parenthesized
group is considered, so unrelated parentheses earlier in the title are
harmless.
"""

import re
from typing import Optional

from .errors import MalformedTitleError

REFERENCE_PATTERN = re.compile(r"^#(\d+)$")


def extract_title(raw_message: str) -> str:
    """Return the first line of a commit message, trimmed.

    An empty message yields an empty string.
    """
    if not raw_message:
        return ""
    return raw_message.strip().split("\n")[0].strip()


def _last_group(title: str) -> Optional[str]:
    left = title.rfind("(")
    right = title.rfind(")")
    if left == -1 or right == -1 or right < left:
        return None
    return title[left + 1 : right]


def extract_reference_number(title: str) -> int:
    """Extract N from the last ``(#N)`` group of a title.

    Raises:
        MalformedTitleError: If the last parenthesized group is missing or is
            not ``#<digits>``.
    """
    group = _last_group(title)
    match = REFERENCE_PATTERN.match(group) if group is not None else None
    if match is None:
        raise MalformedTitleError(f'invalid commit message "{title}"')
    return int(match.group(1))


def find_reference_number(title: str) -> Optional[int]:
    try:
        return extract_reference_number(title)
    except MalformedTitleError:
        return None


def strip_reference(title: str) -> str:
    """Drop the trailing ``(#N)`` marker, if the title has one."""
    if find_reference_number(title) is None:
        return title
    return title[: title.rfind("(")].rstrip()


def format_pr_name(owner: str, repo: str, number: int) -> str:
    # e.g. "apache/incubator-pegasus#42"
    return f"{owner}/{repo}#{number}"
