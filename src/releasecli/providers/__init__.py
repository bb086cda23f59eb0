"""History and forge providers.

Example usage:
    from releasecli.providers import GitHistoryProvider, GithubForgeProvider

    history = GitHistoryProvider.open("/home/pegasus")
    forge = GithubForgeProvider("apache", "incubator-pegasus", token=token)
"""

from .base import ForgeProvider, HistoryProvider
from .git_history import GitHistoryProvider
from .github_forge import GithubForgeProvider

__all__ = [
    "HistoryProvider",
    "ForgeProvider",
    "GitHistoryProvider",
    "GithubForgeProvider",
]
