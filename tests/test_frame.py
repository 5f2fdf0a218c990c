"""Tests for frame state computation."""

import json

import pytest

from scenereel.facade import Scene
from scenereel.frame import assign_layout, compute_frame_state
from scenereel.techniques import FadeIn, FadeUp, Stagger
from scenereel.types import FrameState, LayoutConfig


def _by_id(state, element_id):
    return next(e for e in state.elements if e.id == element_id)


class TestLayout:
    def test_single_element_is_centered(self):
        m = Scene()
        title = m.title("Only")
        m.wait(1.0)
        state = compute_frame_state(m, 0.5)
        assert _by_id(state, title).layout_y == 0.5

    def test_header_and_body(self):
        m = Scene()
        body = m.show("Body first")
        header = m.section("Header second")
        m.wait(1.0)
        state = compute_frame_state(m, 0.5)
        assert _by_id(state, header).layout_y == pytest.approx(0.3)
        assert _by_id(state, body).layout_y == pytest.approx(0.65)

    def test_three_elements_spread_over_band(self):
        m = Scene()
        ids = [m.title("T"), m.show("A"), m.show("B")]
        m.wait(1.0)
        state = compute_frame_state(m, 0.5)
        assert [_by_id(state, i).layout_y for i in ids] == pytest.approx([0.2, 0.5, 0.8])

    def test_layout_resets_after_clear(self):
        m = Scene()
        m.title("Old header")
        m.show("Old body")
        m.wait(1.0)
        m.clear()
        fresh = m.show("Fresh")
        m.wait(1.0)
        state = compute_frame_state(m, 1.5)
        assert _by_id(state, fresh).layout_y == 0.5

    def test_assign_layout_empty(self):
        assert assign_layout([], LayoutConfig()) == {}

    def test_custom_layout(self):
        m = Scene()
        title = m.title("Only")
        m.wait(1.0)
        state = compute_frame_state(m, 0.5, LayoutConfig(single=0.4))
        assert _by_id(state, title).layout_y == 0.4


class TestVisibility:
    def test_future_element_is_hidden(self):
        m = Scene()
        m.wait(1.0)
        later = m.show("Later")
        m.wait(1.0)
        early = compute_frame_state(m, 0.5)
        assert not _by_id(early, later).visible
        assert _by_id(early, later).opacity == 0.0
        assert _by_id(compute_frame_state(m, 1.5), later).visible

    def test_cleared_element_is_hidden(self):
        m = Scene()
        old = m.title("Old")
        m.wait(1.0)
        m.clear()
        m.wait(1.0)
        assert _by_id(compute_frame_state(m, 0.5), old).visible
        assert not _by_id(compute_frame_state(m, 1.5), old).visible

    def test_unanimated_element_is_identity(self):
        m = Scene()
        shown = m.show("Static")
        m.wait(1.0)
        element = _by_id(compute_frame_state(m, 0.5), shown)
        assert (element.opacity, element.scale, element.translate_x) == (1.0, 1.0, 0.0)


class TestAnimation:
    def test_fade_in_midpoint(self):
        m = Scene()
        title = m.title("Hello")
        m.play(FadeIn(duration_seconds=1.0))
        assert _by_id(compute_frame_state(m, 0.5), title).opacity == pytest.approx(0.5)
        assert _by_id(compute_frame_state(m, 1.0), title).opacity == 1.0

    def test_stagger_items_lag(self):
        m = Scene()
        steps = m.steps(["a", "b", "c"])
        m.play(Stagger(FadeIn(duration_seconds=1.0), count=3, delay=0.5))
        element = _by_id(compute_frame_state(m, 0.75), steps)
        opacities = [item.opacity for item in element.item_transforms]
        assert opacities == pytest.approx([0.75, 0.25, 0.0])

    def test_staggered_element_tracks_first_item(self):
        m = Scene()
        steps = m.steps(["a", "b", "c"])
        m.play(Stagger(FadeIn(duration_seconds=1.0), count=3, delay=0.5))
        for t in (0.25, 0.5, 1.0, 1.5):
            element = _by_id(compute_frame_state(m, t), steps)
            assert element.opacity == pytest.approx(element.item_transforms[0].opacity)
        assert _by_id(compute_frame_state(m, 1.0), steps).opacity == 1.0

    def test_non_steps_elements_have_no_item_transforms(self):
        m = Scene()
        shown = m.show("x")
        m.play(FadeUp())
        assert _by_id(compute_frame_state(m, 0.3), shown).item_transforms == []


class TestFrameFields:
    def test_time_is_clamped(self):
        m = Scene()
        m.wait(2.0)
        assert compute_frame_state(m, -1.0).time == 0.0
        late = compute_frame_state(m, 10.0)
        assert late.time == 2.0
        assert late.frame == 59

    def test_active_narration(self):
        m = Scene(words_per_minute=60.0)
        m.wait(1.0)
        m.narrate("hello")
        assert compute_frame_state(m, 0.5).active_narration is None
        assert compute_frame_state(m, 1.5).active_narration == "hello"

    def test_theme_properties(self):
        m = Scene()
        m.wait(1.0)
        theme = compute_frame_state(m, 0.0).theme
        assert theme.name == "reel-dark"
        assert theme.css_properties["--reel-bg-primary"] == "#0f172a"


class TestWireFormat:
    def test_json_uses_camel_case_and_explicit_null(self):
        m = Scene()
        m.metric("Errors", "3", "down")
        m.play(FadeIn())
        payload = json.loads(compute_frame_state(m, 0.25).to_json())
        assert payload["activeNarration"] is None
        assert "totalDuration" in payload
        element = payload["elements"][0]
        assert element["kind"] == {"type": "metric", "direction": "down"}
        assert "translateX" in element
        assert "layoutY" in element
        assert "cssProperties" in payload["theme"]

    def test_round_trip(self):
        m = Scene()
        m.section("Intro")
        m.steps(["one", "two"])
        m.play(Stagger(FadeUp(), count=2))
        m.narrate("Talking")
        state = compute_frame_state(m, 0.4)
        assert FrameState.from_json(state.to_json()) == state
