"""Tests for the scene scripting facade."""

import pytest

from scenereel.errors import ConfigurationError
from scenereel.facade import (
    BEAT_DURATION,
    BREATH_DURATION,
    AnimationRecord,
    Scene,
    estimate_narration_seconds,
)
from scenereel.techniques import FadeIn, Slide
from scenereel.types import AnimationSegment, Direction, MetricKind, NarrationSegment, SilenceSegment, StepsKind


class TestPacing:
    def test_narration_estimate_uses_words_per_minute(self):
        assert estimate_narration_seconds("one two three", 180.0) == pytest.approx(1.0)
        assert estimate_narration_seconds("", 60.0) == pytest.approx(1.0)

    def test_beat_and_breath_append_silence(self):
        m = Scene()
        m.beat()
        m.breath()
        durations = [s.duration for s in m.timeline.segments]
        assert durations == [BEAT_DURATION, BREATH_DURATION]
        assert all(isinstance(s, SilenceSegment) for s in m.timeline.segments)

    def test_narrate_appends_estimated_segment(self):
        m = Scene(words_per_minute=120.0)
        m.narrate("two words")
        (segment,) = m.timeline.segments
        assert isinstance(segment, NarrationSegment)
        assert segment.duration == pytest.approx(1.0)

    def test_words_per_minute_must_be_positive(self):
        with pytest.raises(ConfigurationError):
            Scene(words_per_minute=0)


class TestElements:
    def test_ids_increase_and_creation_time_is_recorded(self):
        m = Scene()
        first = m.title("Hello")
        m.wait(1.0)
        second = m.show("World")
        assert (first, second) == (0, 1)
        records = m.elements
        assert records[0].created_at == 0.0
        assert records[1].created_at == 1.0

    def test_metric_formats_content(self):
        m = Scene()
        m.metric("Latency", "120ms", "down")
        record = m.elements[0]
        assert record.content == "Latency: 120ms"
        assert record.kind == MetricKind(direction=Direction.DOWN)

    def test_steps_records_items(self):
        m = Scene()
        m.steps(["a", "b", "c"])
        record = m.elements[0]
        assert record.kind == StepsKind(count=3)
        assert record.items == ["a", "b", "c"]

    def test_clear_retires_visible_elements(self):
        m = Scene()
        m.title("One")
        m.wait(1.0)
        m.clear()
        m.show("Two")
        old, new = m.elements
        assert old.cleared_at == 1.0
        assert not old.is_visible(1.0)
        assert old.is_visible(0.5)
        assert new.cleared_at is None


class TestPlay:
    def test_play_targets_pending_elements(self):
        m = Scene()
        a = m.title("A")
        b = m.show("B")
        m.play(FadeIn())
        (anim,) = m.animations
        assert anim.targets == (a, b)
        assert anim.start == 0.0
        assert isinstance(m.timeline.segments[-1], AnimationSegment)
        assert m.now() == pytest.approx(0.5)

    def test_second_play_targets_latest_element(self):
        m = Scene()
        m.title("A")
        b = m.show("B")
        m.play(FadeIn())
        m.play(Slide())
        assert m.animations[1].targets == (b,)
        assert m.animations[1].start == pytest.approx(0.5)

    def test_progress_at(self):
        record = AnimationRecord(technique=FadeIn(), start=1.0, duration=0.5, anchor=0, targets=(0,))
        assert record.progress_at(0.0) == 0.0
        assert record.progress_at(1.25) == pytest.approx(0.5)
        assert record.progress_at(9.0) == 1.0

    def test_zero_duration_progress_is_a_step(self):
        record = AnimationRecord(technique=FadeIn(0.0), start=1.0, duration=0.0, anchor=0, targets=(0,))
        assert record.progress_at(0.99) == 0.0
        assert record.progress_at(1.0) == 1.0


class TestTheme:
    def test_set_theme_by_name(self):
        m = Scene()
        m.set_theme("light")
        assert m.theme.name == "reel-light"

    def test_unknown_theme(self):
        with pytest.raises(ConfigurationError):
            Scene().set_theme("neon")


class TestResolveNarration:
    def test_records_are_retimed(self):
        m = Scene(words_per_minute=60.0)
        m.narrate("one two")
        m.title("After")
        m.play(FadeIn())
        m.narrate("three")
        m.clear()
        m.show("Later")

        m.resolve_narration_durations([0.5, 0.25])

        title, later = m.elements
        assert title.created_at == pytest.approx(0.5)
        assert title.cleared_at == pytest.approx(1.25)
        assert later.created_at == pytest.approx(1.25)
        assert m.animations[0].start == pytest.approx(0.5)
        assert m.now() == pytest.approx(1.25)
