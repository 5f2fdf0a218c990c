from __future__ import annotations

from .facade import Scene
from .techniques import CountUp, FadeIn, FadeUp, Slide, Stagger, Technique
from .types import Direction


def demo_scene(m: Scene) -> None:
    """A short multi-slide explainer exercising every element kind and technique."""

    def section_slide() -> Technique:
        return Slide(duration_seconds=0.5, offset_x=-200.0, offset_y=0.0).with_ease("ease_out")

    m.title("Scenes as code")
    m.play(FadeIn(duration_seconds=0.8))
    m.beat()
    m.narrate("What if an explainer video was just a script you could run?")
    m.breath()

    m.clear()
    m.section("How it works")
    m.play(section_slide())
    m.narrate("Write a scene. Run one command. Get a video.")
    m.steps(["Write a scene", "Run scenereel build", "Share the MP4"])
    m.play(Stagger(FadeUp().with_ease("out_back"), count=3))
    m.breath()

    m.clear()
    m.section("By the numbers")
    m.play(section_slide())
    m.narrate("Every frame is computed from the timeline alone.")
    m.metric("Mutable state", "0", Direction.DOWN)
    m.play(CountUp())
    m.beat()

    m.clear()
    m.title("scenereel")
    m.play(FadeIn(duration_seconds=0.8))
    m.show("Deterministic. Offline. Scriptable.")
    m.play(FadeIn(duration_seconds=0.6))
    m.narrate("Thanks for watching.")
    m.beat()
