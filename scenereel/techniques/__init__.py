from .base import Technique, WithEase
from .data import CountUp
from .motion import Scale, Slide
from .reveals import FadeIn, FadeUp
from .staging import Stagger

TECHNIQUES = {
    "FadeIn": FadeIn,
    "FadeUp": FadeUp,
    "Slide": Slide,
    "Scale": Scale,
    "CountUp": CountUp,
}

__all__ = [
    "Technique",
    "WithEase",
    "FadeIn",
    "FadeUp",
    "Slide",
    "Scale",
    "CountUp",
    "Stagger",
    "TECHNIQUES",
]
