"""Jinja2 templates for markdown output.

Templates live in the ``releasecli/templates/<format>/`` package directory.
"""

from typing import Any, Optional
from jinja2 import Environment, PackageLoader


def _escape_cell(value: Any) -> str:
    # a pipe would split the markdown table cell
    return str(value).replace("|", "\\|")


def _create_jinja_env() -> Environment:
    env = Environment(
        loader=PackageLoader("releasecli", "templates"),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["cell"] = _escape_cell
    env.filters["short_sha"] = lambda sha: sha[:10] if sha else ""
    return env


_jinja_env: Optional[Environment] = None


def get_jinja_env() -> Environment:
    global _jinja_env
    if _jinja_env is None:
        _jinja_env = _create_jinja_env()
    return _jinja_env


def render_template(format: str, name: str, **context: Any) -> str:
    """Render ``templates/<format>/<name>.jinja2`` with context.

    Raises:
        TemplateNotFound: If the template file doesn't exist.
    """
    template = get_jinja_env().get_template(f"{format}/{name}.jinja2")
    return template.render(**context)
