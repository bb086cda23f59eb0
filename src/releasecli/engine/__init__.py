"""Commit reconciliation engine.

Example usage:
    from releasecli.engine import (
        ReconciliationDriver,
        ReleaseQuery,
        VersionResolver,
        Workspace,
    )

    workspace = Workspace(history)
    resolver = VersionResolver(history)
    driver = ReconciliationDriver(workspace, resolver, ReleaseQuery(owner="apache", repo="incubator-pegasus"))
    entries = driver.unreleased_in_branch(resolver.latest_released_version())
"""

from .classifier import classify, title_index, titles_of, walk
from .divergence import DEFAULT_MAX_DIVERGENCE_STEPS, find_by_title, locate
from .driver import (
    ReconciliationDriver,
    ReleaseQuery,
    is_present,
    is_released_at,
    shipped_in,
)
from .porter import port, port_order
from .versions import VersionResolver, parse_minor_prefix, parse_version
from .workspace import BranchView, Workspace

__all__ = [
    # Checkout ownership
    "Workspace",
    "BranchView",
    # Versions
    "VersionResolver",
    "parse_version",
    "parse_minor_prefix",
    # Divergence
    "DEFAULT_MAX_DIVERGENCE_STEPS",
    "find_by_title",
    "locate",
    # Classification
    "classify",
    "title_index",
    "titles_of",
    "walk",
    # Queries
    "ReconciliationDriver",
    "ReleaseQuery",
    "is_present",
    "is_released_at",
    "shipped_in",
    # Porting
    "port",
    "port_order",
]
