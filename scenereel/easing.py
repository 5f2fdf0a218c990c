from __future__ import annotations

import functools
import math
from enum import Enum
from typing import Callable, Dict

from .errors import ConfigurationError

Curve = Callable[[float], float]


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _unit_curve(shape: Curve) -> Curve:
    """Clamp input to [0, 1] and pin both endpoints exactly."""

    @functools.wraps(shape)
    def curve(t: float) -> float:
        t = clamp(t, 0.0, 1.0)
        if t == 0.0 or t == 1.0:
            return t
        return shape(t)

    return curve


@_unit_curve
def linear(t: float) -> float:
    return t


@_unit_curve
def ease_in(t: float) -> float:
    return t ** 2


@_unit_curve
def ease_out(t: float) -> float:
    return 1 - (1 - t) ** 2


@_unit_curve
def ease_in_out(t: float) -> float:
    return ease_in(2 * t) / 2 if t < 0.5 else 0.5 + ease_out(2 * t - 1) / 2


_BACK_C1 = 1.70158
_BACK_C3 = _BACK_C1 + 1


@_unit_curve
def out_back(t: float) -> float:
    u = t - 1
    return 1 + _BACK_C3 * u ** 3 + _BACK_C1 * u ** 2


_BOUNCE_N = 7.5625
_BOUNCE_D = 2.75
# (segment end, segment centre, resting height) for each bounce after the first drop.
_BOUNCES = ((2 / _BOUNCE_D, 1.5 / _BOUNCE_D, 0.75), (2.5 / _BOUNCE_D, 2.25 / _BOUNCE_D, 0.9375))


@_unit_curve
def out_bounce(t: float) -> float:
    if t < 1 / _BOUNCE_D:
        return _BOUNCE_N * t ** 2
    for end, centre, height in _BOUNCES:
        if t < end:
            return _BOUNCE_N * (t - centre) ** 2 + height
    return _BOUNCE_N * (t - 2.625 / _BOUNCE_D) ** 2 + 0.984375


@_unit_curve
def spring(t: float) -> float:
    # Damped oscillation settling on 1.
    return 1 - math.exp(-6.0 * t) * math.cos(4.5 * math.pi * t)


class Ease(str, Enum):
    LINEAR = "linear"
    EASE_IN = "ease_in"
    EASE_OUT = "ease_out"
    EASE_IN_OUT = "ease_in_out"
    OUT_BACK = "out_back"
    OUT_BOUNCE = "out_bounce"
    SPRING = "spring"


EASING_FUNCTIONS: Dict[str, Curve] = {
    Ease.LINEAR.value: linear,
    Ease.EASE_IN.value: ease_in,
    Ease.EASE_OUT.value: ease_out,
    Ease.EASE_IN_OUT.value: ease_in_out,
    Ease.OUT_BACK.value: out_back,
    Ease.OUT_BOUNCE.value: out_bounce,
    Ease.SPRING.value: spring,
}


def get_easing(name: "str | Ease") -> Curve:
    key = name.value if isinstance(name, Ease) else name
    try:
        return EASING_FUNCTIONS[key]
    except KeyError:
        raise ConfigurationError(
            f"Unknown easing curve: {key}",
            hint="Available curves: " + ", ".join(EASING_FUNCTIONS),
        ) from None
