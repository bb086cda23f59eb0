"""Version of the release-cli tool itself.

Installed copies read it from package metadata (written by setuptools-scm);
a source checkout asks git for the nearest tag instead.
"""

import os
from importlib.metadata import version, PackageNotFoundError

import git

DISTRIBUTION = "release-cli"


def get_version() -> str:
    """Return e.g. "0.3.0", "0.3.1.dev4+g1234abc" or "unknown"."""
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        return _describe_source_checkout()


def _describe_source_checkout() -> str:
    try:
        repo = git.Repo(os.path.dirname(__file__), search_parent_directories=True)
        return repo.git.describe("--tags", "--dirty", "--always")
    except (
        git.exc.InvalidGitRepositoryError,
        git.exc.NoSuchPathError,
        git.exc.GitCommandError,
    ):
        return "unknown"


__version__ = get_version()
