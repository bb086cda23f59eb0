from typing import Tuple


def short_sha(sha: str) -> str:
    return sha[:10]


def parse_owner_repo(url: str) -> Tuple[str, str]:
    """Split a remote URL into (owner, repo).

    Supports both SSH and HTTPS formats:
    - git@github.com:apache/incubator-pegasus.git
    - https://github.com/apache/incubator-pegasus.git
    - https://github.com/apache/incubator-pegasus

    Args:
        url: Git remote URL.

    Returns:
        Tuple of owner and repository name, e.g. ("apache", "incubator-pegasus").

    Raises:
        ValueError: If the URL has fewer than two path segments.
    """
    url = url.strip()
    if url.endswith(".git"):
        url = url[: -len(".git")]
    parts = url.rstrip("/").split("/")
    if len(parts) < 2:
        raise ValueError(f"Cannot parse owner and repository from URL '{url}'")

    owner, repo = parts[-2], parts[-1]
    # ssh url: the owner segment still carries "git@github.com:"
    colon = owner.find(":")
    if colon != -1:
        owner = owner[colon + 1 :]
    return owner, repo
