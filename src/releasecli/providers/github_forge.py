"""PyGithub implementation of the forge provider."""

import logging
from contextlib import contextmanager
from typing import Optional

import github
import requests
from github import Auth
from github import Repository as GithubRepository

from ..errors import ForgeError, ForgeNotFoundError, ForgeRateLimitError
from ..models import Label, PullRequestInfo
from .base import ForgeProvider

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 3


@contextmanager
def forge_call(what: str):
    """Translate PyGithub and transport failures into forge errors."""
    try:
        yield
    except github.UnknownObjectException as e:
        raise ForgeNotFoundError(f"{what}: not found ({e.status})")
    except github.RateLimitExceededException as e:
        raise ForgeRateLimitError(f"{what}: rate limit exceeded ({e.status})")
    except github.GithubException as e:
        raise ForgeError(f"{what}: {e.status} {e.data}")
    except requests.exceptions.RequestException as e:
        raise ForgeError(f"{what}: {e}")


class GithubForgeProvider(ForgeProvider):
    def __init__(
        self,
        owner: str,
        repo: str,
        token: Optional[str] = None,
        timeout: int = DEFAULT_TIMEOUT,
        client: Optional[github.Github] = None,
    ):
        self.owner = owner
        self.repo_name = repo
        if client is None:
            auth = Auth.Token(token) if token else None
            # No retry: a transient failure is fatal to the invocation.
            client = github.Github(auth=auth, timeout=timeout, retry=None)
        self.gh = client
        self._gh_repo: Optional[GithubRepository.Repository] = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo_name}"

    def get_gh_repo(self) -> GithubRepository.Repository:
        if self._gh_repo is None:
            self._gh_repo = self.gh.get_repo(self.full_name, lazy=True)
        return self._gh_repo

    def get_pull_request(self, number: int) -> PullRequestInfo:
        with forge_call(f"get pull request {self.full_name}#{number}"):
            pr = self.get_gh_repo().get_pull(number)
            return PullRequestInfo(
                number=pr.number,
                title=pr.title,
                merge_commit_hash=pr.merge_commit_sha,
                merged_at=pr.merged_at,
                labels=tuple(label.name for label in pr.labels),
            )

    def get_label(self, name: str) -> Label:
        with forge_call(f"get label '{name}'"):
            return Label(name=self.get_gh_repo().get_label(name).name)

    def create_label(self, name: str, color: str) -> Label:
        with forge_call(f"create label '{name}'"):
            label = self.get_gh_repo().create_label(name, color)
            log.debug(f"created label {label.name} on {self.full_name}")
            return Label(name=label.name)

    def add_label(self, pr_number: int, name: str) -> None:
        with forge_call(f"add label '{name}' to #{pr_number}"):
            self.get_gh_repo().get_issue(pr_number).add_to_labels(name)
