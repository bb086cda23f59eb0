import os
import subprocess
import logging
from typing import Optional, Tuple

from .config import ReleaseConfig, load_config
from .engine import ReconciliationDriver, ReleaseQuery, VersionResolver, Workspace
from .errors import ConfigurationError, ResolutionError
from .providers import ForgeProvider, GitHistoryProvider, GithubForgeProvider, HistoryProvider
from .utils.git_utils import parse_owner_repo

log = logging.getLogger(__name__)

TOKEN_ENV_VARS = ("ACCESS_TOKEN", "GITHUB_TOKEN", "GH_TOKEN")


def gh_auth_token() -> Optional[str]:
    for name in TOKEN_ENV_VARS:
        token = os.getenv(name)
        if token:
            return token

    try:
        token = subprocess.check_output(
            ["gh", "auth", "token"], text=True, stderr=subprocess.DEVNULL
        ).strip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        token = None

    return token or None


class AppContext:
    """Per-invocation state shared by the commands.

    Providers are created on first use, so commands that never talk to the
    forge never need a token. Tests preset ``history`` and ``forge``.
    """

    def __init__(
        self,
        history: Optional[HistoryProvider] = None,
        forge: Optional[ForgeProvider] = None,
    ):
        self.repo_path: str = "."
        self.config_path: Optional[str] = None
        self.history = history
        self.forge = forge
        self._config: Optional[ReleaseConfig] = None
        self._workspace: Optional[Workspace] = None

    @property
    def config(self) -> ReleaseConfig:
        if self._config is None:
            self._config = load_config(self.config_path, base_dir=self.repo_path)
        return self._config

    def get_history(self) -> HistoryProvider:
        if self.history is None:
            self.history = GitHistoryProvider.open(self.repo_path)
        return self.history

    def get_workspace(self) -> Workspace:
        if self._workspace is None:
            self._workspace = Workspace(self.get_history())
        return self._workspace

    def get_resolver(self) -> VersionResolver:
        repo_config = self.config.repository
        return VersionResolver(
            self.get_history(),
            tag_prefix=repo_config.tag_prefix,
            branch_prefix=repo_config.branch_prefix,
        )

    def remote_url(self) -> str:
        return self.get_history().remote_url(self.config.repository.remote)

    def get_owner_repo(self) -> Tuple[str, str]:
        url = self.remote_url()
        try:
            return parse_owner_repo(url)
        except ValueError as e:
            raise ResolutionError(str(e))

    def get_forge(self, token: Optional[str] = None, require_token: bool = False) -> ForgeProvider:
        if self.forge is not None:
            return self.forge

        token = token or gh_auth_token()
        if token is None and require_token:
            raise ConfigurationError(
                "GitHub token not found. Use --access or set ACCESS_TOKEN, "
                "GITHUB_TOKEN or GH_TOKEN."
            )
        owner, repo = self.get_owner_repo()
        self.forge = GithubForgeProvider(
            owner, repo, token=token, timeout=self.config.forge.timeout
        )
        return self.forge

    def get_driver(self) -> ReconciliationDriver:
        owner, repo = self.get_owner_repo()
        query = ReleaseQuery(
            trunk=self.config.repository.trunk,
            owner=owner,
            repo=repo,
            max_divergence_steps=self.config.divergence.max_steps,
        )
        return ReconciliationDriver(self.get_workspace(), self.get_resolver(), query)
