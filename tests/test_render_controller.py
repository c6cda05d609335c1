"""Unit tests for the render controller and the artifact store."""

from __future__ import annotations

from pathlib import Path

import pytest

from surfaceview.core.contracts.snapshot import FormSnapshot
from surfaceview.core.result import RequestOutcome, failure, success
from surfaceview.render.artifact import ArtifactStore, extension_for
from surfaceview.render.controller import RenderController, RenderState, hint_opacity_for
from surfaceview.render.viewport import MemoryViewPort, ViewPort

SVG = b"<svg/>"


def _ok(**fields: str) -> RequestOutcome:
    return success(SVG, FormSnapshot.of(fields), "image/svg+xml")


def test_success_paints_colors_and_reveals_view() -> None:
    """Background and border take the snapshot's color; containers become visible."""
    view = MemoryViewPort()
    ctl = RenderController(view)

    assert ctl.on_outcome(_ok(background="#00ff00", func="sinc"))

    s = view.state
    assert s.background_color == "#00ff00"
    assert s.border_color == "#00ff00"
    assert s.artifact_visible and s.settings_visible
    assert s.source is not None and s.source.startswith("data:image/svg+xml;base64,")
    assert s.hint_opacity == 0


@pytest.mark.parametrize(  # type: ignore[misc]
    ("func", "expected"),
    [("saddle", 25), ("schaffer", 0), ("Saddle", 0), ("", 0), (None, 0)],
)
def test_saddle_hint_rule(func: str | None, expected: int) -> None:
    assert hint_opacity_for(func) == expected


def test_saddle_snapshot_shows_hint_and_missing_func_hides_it() -> None:
    view = MemoryViewPort()
    ctl = RenderController(view)

    ctl.on_outcome(_ok(background="#000", func="saddle"))
    assert view.state.hint_opacity == 25

    ctl.on_outcome(_ok(background="#000"))
    assert view.state.hint_opacity == 0


def test_failure_hides_view_and_shows_message() -> None:
    view = MemoryViewPort()
    ctl = RenderController(view)
    ctl.on_outcome(_ok(background="#fff"))

    assert ctl.on_outcome(failure("bad request"))

    s = view.state
    assert s.error_text == "bad request"
    assert s.error_visible
    assert not s.artifact_visible and not s.settings_visible


def test_state_machine_tracks_overlapping_requests() -> None:
    """IDLE -> AWAITING_RESULT on dispatch, back to IDLE when all outcomes arrived."""
    ctl = RenderController(MemoryViewPort(), policy="arrival")
    assert ctl.state is RenderState.IDLE

    t1 = ctl.begin()
    t2 = ctl.begin()
    assert (t1, t2) == (1, 2)
    assert ctl.state is RenderState.AWAITING_RESULT and ctl.in_flight == 2

    ctl.on_outcome(failure("x"), ticket=t1)
    assert ctl.state is RenderState.AWAITING_RESULT
    ctl.on_outcome(failure("y"), ticket=t2)
    assert ctl.state is RenderState.IDLE


def test_latest_policy_drops_older_outcome_arriving_late() -> None:
    """A slow response for an older request must not overwrite a newer render."""
    view = MemoryViewPort()
    ctl = RenderController(view, policy="latest")
    old, new = ctl.begin(), ctl.begin()

    assert ctl.on_outcome(_ok(background="#222222"), ticket=new)
    assert not ctl.on_outcome(_ok(background="#111111"), ticket=old)

    assert view.state.background_color == "#222222"
    assert view.state.renders == 1
    assert ctl.state is RenderState.IDLE


def test_default_policy_lets_last_arrival_win() -> None:
    """Without a policy argument both outcomes render and the later arrival wins."""
    view = MemoryViewPort()
    ctl = RenderController(view)
    assert ctl.policy == "arrival"
    old, new = ctl.begin(), ctl.begin()

    ctl.on_outcome(_ok(background="#222222"), ticket=new)
    assert ctl.on_outcome(_ok(background="#111111"), ticket=old)

    assert view.state.background_color == "#111111"
    assert view.state.renders == 2


def test_unknown_policy_rejected() -> None:
    with pytest.raises(ValueError):
        RenderController(MemoryViewPort(), policy="newest")


def test_memory_viewport_satisfies_protocol() -> None:
    assert isinstance(MemoryViewPort(), ViewPort)


def test_artifact_files_replace_previous_render(tmp_path: Path) -> None:
    """Directory mode keeps exactly one image on disk."""
    store = ArtifactStore(tmp_path / "renders")
    view = MemoryViewPort()
    ctl = RenderController(view, artifacts=store)

    ctl.on_outcome(_ok(background="#fff"))
    first = store.current
    assert first is not None and first.read_bytes() == SVG
    assert view.state.source == first.resolve().as_uri()

    ctl.on_outcome(success(b"\x89PNG", FormSnapshot.of({}), "image/png"))
    second = store.current
    assert second is not None and second.suffix == ".png"
    assert not first.exists()
    assert sorted(p.name for p in (tmp_path / "renders").iterdir()) == [second.name]

    store.release()
    assert not second.exists() and store.current is None


def test_unwritable_artifact_dir_renders_as_failure(tmp_path: Path) -> None:
    """Storage errors are shown like any other failure instead of raising."""
    store = ArtifactStore(tmp_path)
    view = MemoryViewPort()
    ctl = RenderController(view, artifacts=store)
    store.directory = tmp_path / "gone" / "deeper"

    assert ctl.on_outcome(_ok(background="#fff"))
    assert view.state.error_visible
    assert view.state.error_text.startswith("Could not store image")
    assert not view.state.artifact_visible


@pytest.mark.parametrize(  # type: ignore[misc]
    ("content_type", "ext"),
    [("image/svg+xml", ".svg"), ("image/png; charset=binary", ".png"), (None, ".bin")],
)
def test_extension_for(content_type: str | None, ext: str) -> None:
    assert extension_for(content_type) == ext
