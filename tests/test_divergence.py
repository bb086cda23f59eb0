import logging

import pytest

from releasecli.engine.divergence import DEFAULT_MAX_DIVERGENCE_STEPS, find_by_title, locate
from releasecli.engine.workspace import Workspace
from releasecli.errors import DivergencePointNotFoundError, ErrorKind, StaleCheckoutError


class TestWorkspace:
    def test_checkout_skipped_when_current(self, released_repo):
        ws = Workspace(released_repo)
        view = ws.checkout("master")
        assert released_repo.checkouts == []
        assert view.is_current()

    def test_new_checkout_invalidates_views(self, released_repo):
        ws = Workspace(released_repo)
        master = ws.checkout("master")
        branch = ws.checkout("v1.12")

        assert released_repo.checkouts == ["v1.12"]
        assert branch.is_current()
        with pytest.raises(StaleCheckoutError) as excinfo:
            list(master.log())
        assert excinfo.value.kind == ErrorKind.RESOLUTION

    def test_checkout_during_walk_is_detected(self, released_repo):
        ws = Workspace(released_repo)
        master = ws.checkout("master")
        commits = master.log()
        next(commits)
        ws.checkout("v1.12")
        with pytest.raises(StaleCheckoutError):
            next(commits)


def test_find_by_title_is_idempotent(released_repo):
    view = Workspace(released_repo).checkout("v1.12")
    first = find_by_title(view, "Fix leak (#12)")
    second = find_by_title(view, "Fix leak (#12)")
    assert first is not None
    assert first.hash == second.hash
    # the picked copy on the branch, not the trunk original
    assert first.hash != released_repo.commits["c0003"].hash
    assert find_by_title(view, "Add metrics (#11)") is None


def test_locate_direct_match(released_repo, caplog):
    ws = Workspace(released_repo)
    branch = ws.checkout("v1.12")
    start = released_repo.tag("v1.12.0")
    trunk = ws.checkout("master")

    with caplog.at_level(logging.INFO):
        on_branch, on_trunk = locate(branch, trunk, start)

    assert on_branch.hash == on_trunk.hash == start.hash
    assert "start scanning from commit" in caplog.text


def test_locate_steps_back_to_parent(history, caplog):
    history.create_branch("master")
    base = history.commit_on("master", "Base (#1)")
    history.commit_on("master", "Feature (#2)")
    history.create_branch("v1.0", base)
    # squashed on the branch, so its title never reaches trunk
    cut = history.commit_on("v1.0", "Release prep")

    ws = Workspace(history)
    branch = ws.checkout("v1.0")
    trunk = ws.checkout("master")
    with caplog.at_level(logging.INFO):
        on_branch, on_trunk = locate(branch, trunk, cut)

    assert on_branch.title == on_trunk.title == "Base (#1)"
    assert "use its parent instead" in caplog.text


def _unrelated_branch(history, length):
    history.create_branch("master")
    history.commit_on("master", "Trunk only (#1)")
    history.create_branch("v9.9")
    tip = None
    for i in range(length):
        tip = history.commit_on("v9.9", f"Branch only {i} (#{100 + i})")
    return tip


def test_locate_gives_up_after_max_steps(history):
    tip = _unrelated_branch(history, DEFAULT_MAX_DIVERGENCE_STEPS + 5)
    ws = Workspace(history)
    branch = ws.checkout("v9.9")
    trunk = ws.checkout("master")

    with pytest.raises(DivergencePointNotFoundError) as excinfo:
        locate(branch, trunk, tip)
    assert "after 10 steps" in excinfo.value.message


def test_locate_gives_up_at_root(history):
    tip = _unrelated_branch(history, 3)
    ws = Workspace(history)
    branch = ws.checkout("v9.9")
    trunk = ws.checkout("master")

    with pytest.raises(DivergencePointNotFoundError) as excinfo:
        locate(branch, trunk, tip)
    assert "unable to find parent" in excinfo.value.message


def test_locate_respects_configured_bound(history):
    history.create_branch("master")
    base = history.commit_on("master", "Base (#1)")
    history.create_branch("v1.0", base)
    tip = None
    for i in range(3):
        tip = history.commit_on("v1.0", f"Branch only {i}")

    ws = Workspace(history)
    branch = ws.checkout("v1.0")
    trunk = ws.checkout("master")
    with pytest.raises(DivergencePointNotFoundError):
        locate(branch, trunk, tip, max_steps=2)
    on_branch, _ = locate(branch, trunk, tip, max_steps=3)
    assert on_branch.hash == base.hash
