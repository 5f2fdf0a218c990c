"""Tests for animation techniques and their composition."""

import pytest

from scenereel.easing import Ease
from scenereel.techniques import TECHNIQUES, CountUp, FadeIn, FadeUp, Scale, Slide, Stagger, WithEase
from scenereel.types import IDENTITY, TechniqueOutput


class TestTechniqueOutput:
    def test_identity_defaults(self):
        identity = TechniqueOutput()
        assert identity.opacity == 1.0
        assert identity.translate_x == 0.0
        assert identity.translate_y == 0.0
        assert identity.scale == 1.0
        assert identity.rotation == 0.0
        assert identity == IDENTITY

    def test_output_is_frozen(self):
        with pytest.raises(Exception):
            IDENTITY.opacity = 0.5


class TestPrimitives:
    def test_fade_in_sets_only_opacity(self):
        out = FadeIn().apply(0.25)
        assert out == TechniqueOutput(opacity=0.25)

    def test_fade_up_moves_from_distance_to_zero(self):
        fade_up = FadeUp(distance=30.0)
        assert fade_up.apply(0.0).translate_y == 30.0
        assert fade_up.apply(0.0).opacity == 0.0
        assert fade_up.apply(1.0).translate_y == 0.0
        assert fade_up.apply(1.0).opacity == 1.0

    def test_slide_offsets_both_axes(self):
        slide = Slide(offset_x=100.0, offset_y=-40.0)
        start = slide.apply(0.0)
        assert (start.translate_x, start.translate_y) == (100.0, -40.0)
        mid = slide.apply(0.5)
        assert (mid.translate_x, mid.translate_y) == (50.0, -20.0)
        end = slide.apply(1.0)
        assert (end.translate_x, end.translate_y) == (0.0, 0.0)

    def test_scale_interpolates(self):
        scale = Scale(start=0.5, end=1.5)
        assert scale.apply(0.0).scale == 0.5
        assert scale.apply(0.5).scale == 1.0
        assert scale.apply(1.0).scale == 1.5

    def test_count_up_uses_opacity_for_fraction(self):
        count = CountUp(start=0.0, end=200.0)
        assert count.apply(0.25).opacity == 0.25
        assert count.value_at(0.25) == 50.0
        assert count.value_at(2.0) == 200.0

    def test_names_and_default_durations(self):
        assert FadeIn().name() == "FadeIn"
        assert FadeIn().duration() == 0.5
        assert FadeUp().duration() == 0.6
        assert Slide().duration() == 0.5
        assert Scale().duration() == 0.4
        assert CountUp().duration() == 1.0

    def test_registry_lists_primitives(self):
        assert TECHNIQUES["FadeUp"] is FadeUp
        assert set(TECHNIQUES) == {"FadeIn", "FadeUp", "Slide", "Scale", "CountUp"}


class TestWithEase:
    def test_eased_slide_midpoint(self):
        eased = Slide().with_ease(Ease.EASE_IN)
        assert eased.apply(0.5).translate_x == 75.0
        assert eased.apply(0.0).translate_x == 100.0
        assert eased.apply(1.0).translate_x == 0.0

    def test_keeps_inner_name_and_duration(self):
        eased = FadeUp(duration_seconds=0.9).with_ease("out_back")
        assert isinstance(eased, WithEase)
        assert eased.name() == "FadeUp"
        assert eased.duration() == 0.9


class TestStagger:
    def test_duration_adds_delay_per_extra_item(self):
        stagger = Stagger(FadeUp(), count=3, delay=0.1)
        assert stagger.name() == "Stagger"
        assert stagger.duration() == pytest.approx(0.8)

    def test_single_item_has_no_extra_duration(self):
        assert Stagger(FadeIn(), count=1, delay=0.5).duration() == 0.5

    @pytest.mark.parametrize("progress", [0.0, 0.1, 0.5, 0.9, 1.0])
    def test_first_item_matches_inner(self, progress):
        inner = FadeUp().with_ease("ease_out")
        stagger = Stagger(inner, count=4, delay=0.2)
        assert stagger.apply_item(0, progress) == inner.apply(progress)

    def test_later_items_lag_behind(self):
        stagger = Stagger(FadeIn(duration_seconds=1.0), count=3, delay=0.25)
        assert stagger.apply_item(1, 0.5).opacity == pytest.approx(0.25)
        assert stagger.apply_item(2, 0.25).opacity == 0.0
        assert stagger.apply_item(2, 1.5).opacity == 1.0

    def test_apply_delegates_to_reference_item(self):
        inner = FadeIn()
        assert Stagger(inner, count=5).apply(0.3) == inner.apply(0.3)

    def test_builder_helpers_return_new_instances(self):
        base = Stagger(FadeIn())
        changed = base.with_count(3).with_delay(0.2)
        assert (base.count, base.delay) == (1, 0.1)
        assert (changed.count, changed.delay) == (3, 0.2)

    def test_stagger_of_eased_fade_up(self):
        stagger = Stagger(FadeUp().with_ease(Ease.OUT_BACK), count=3, delay=0.1)
        start = stagger.apply(0.0)
        assert start.opacity < 0.01
        assert start.translate_y > 29.0
        end = stagger.apply(1.0)
        assert end.opacity == pytest.approx(1.0, abs=0.05)
        assert abs(end.translate_y) < 1.5
