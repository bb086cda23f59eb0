import click
import logging
from typing import Optional
from .app import AppContext

LOG_FORMAT = "[%(levelname)s] %(message)s"

from dotenv import load_dotenv

load_dotenv()


def register_commands(cli):
    from .commands.add import add

    cli.add_command(add)

    from .commands.show import show

    cli.add_command(show)

    from .commands.submit import submit

    cli.add_command(submit)

    from .commands.version_cmd import version

    cli.add_command(version)


@click.group()
@click.pass_obj
@click.option(
    "--repo",
    "repo_path",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
    default=".",
    help="Path to the git repository, e.g. /home/pegasus.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to the config file (default: <repo>/.release-cli.yaml).",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
def cli(app: AppContext, repo_path: str = ".", config_path: Optional[str] = None, verbose: bool = False):
    """Release in the stabilization-branch convention: port, show and submit PRs."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    app.repo_path = repo_path
    app.config_path = config_path


register_commands(cli)


def main():
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
    )
    cli(obj=AppContext())


if __name__ == "__main__":
    main()
