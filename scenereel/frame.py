"""Pure computation of the complete visual/audio state at one timestamp."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .facade import AnimationRecord, Scene
from .techniques import Stagger
from .themes import Theme
from .timeline import Timeline
from .types import (
    HEADER_KINDS,
    IDENTITY,
    ElementRecord,
    ElementState,
    FrameState,
    ItemTransform,
    LayoutConfig,
    NarrationSegment,
    StepsKind,
    TechniqueOutput,
    ThemeState,
)

HIDDEN = TechniqueOutput(opacity=0.0)


def compute_frame_state(scene: Scene, time: float, layout: Optional[LayoutConfig] = None) -> FrameState:
    return compute(scene.elements, scene.animations, scene.timeline, scene.theme, time, layout)


def compute(
    elements: Sequence[ElementRecord],
    animations: Sequence[AnimationRecord],
    timeline: Timeline,
    theme: Theme,
    time: float,
    layout: Optional[LayoutConfig] = None,
) -> FrameState:
    layout = layout or LayoutConfig()
    total_duration = timeline.total_duration()
    fps = timeline.fps
    t = min(max(time, 0.0), total_duration)
    frame = timeline.frame_at(t)

    visible = [record for record in elements if record.is_visible(t)]
    anchors = assign_layout(visible, layout)

    states: List[ElementState] = []
    for record in elements:
        if record.id in anchors:
            transform = _element_transform(record, animations, t)
            item_transforms = _item_transforms(record, animations, t, transform)
            states.append(_element_state(record, True, transform, anchors[record.id], item_transforms))
        else:
            states.append(_element_state(record, False, HIDDEN, layout.single, []))

    return FrameState(
        time=t,
        frame=frame,
        total_duration=total_duration,
        fps=fps,
        elements=states,
        active_narration=find_active_narration(timeline, t),
        theme=ThemeState(name=theme.name, css_properties=dict(theme.to_style_properties())),
    )


def find_active_narration(timeline: Timeline, t: float) -> Optional[str]:
    epsilon = 1.0 / timeline.fps / 2.0
    for _start, segment in timeline.segments_in_range(t, t + epsilon):
        if isinstance(segment, NarrationSegment):
            return segment.text
    return None


def assign_layout(visible: Sequence[ElementRecord], layout: LayoutConfig) -> Dict[int, float]:
    """Vertical anchors (0 top, 1 bottom) for the visible elements, keyed by id."""
    if not visible:
        return {}
    if len(visible) == 1:
        return {visible[0].id: layout.single}

    headers = [r for r in visible if isinstance(r.kind, HEADER_KINDS)]
    bodies = [r for r in visible if not isinstance(r.kind, HEADER_KINDS)]
    ordered = headers + bodies
    if len(ordered) == 2:
        return {ordered[0].id: layout.header, ordered[1].id: layout.body}

    step = (layout.band_bottom - layout.band_top) / (len(ordered) - 1)
    return {record.id: layout.band_top + i * step for i, record in enumerate(ordered)}


def _animations_for(element_id: int, animations: Sequence[AnimationRecord]) -> List[AnimationRecord]:
    return [anim for anim in animations if element_id in anim.targets]


def _element_transform(record: ElementRecord, animations: Sequence[AnimationRecord], t: float) -> TechniqueOutput:
    mine = _animations_for(record.id, animations)
    if not mine:
        return IDENTITY
    started = [anim for anim in mine if anim.start <= t]
    if not started:
        return mine[0].technique.apply(0.0)
    current = started[-1]
    if isinstance(current.technique, Stagger):
        # Element-level transform tracks item 0.
        return current.technique.apply_item(0, _stagger_progress(current, t))
    return current.technique.apply(current.progress_at(t))


def _stagger_progress(anim: AnimationRecord, t: float) -> float:
    """Elapsed time in units of the staggered technique's own duration."""
    inner_duration = anim.technique.inner.duration()
    return (t - anim.start) / inner_duration if inner_duration > 0 else 1.0


def _item_transforms(
    record: ElementRecord,
    animations: Sequence[AnimationRecord],
    t: float,
    element_transform: TechniqueOutput,
) -> List[ItemTransform]:
    if not isinstance(record.kind, StepsKind):
        return []
    mine = [anim for anim in _animations_for(record.id, animations) if anim.start <= t]
    current = mine[-1] if mine else None
    outputs: List[TechniqueOutput] = []
    for index in range(len(record.items)):
        if current is not None and isinstance(current.technique, Stagger):
            outputs.append(current.technique.apply_item(index, _stagger_progress(current, t)))
        else:
            outputs.append(element_transform)
    return [ItemTransform(**output.model_dump()) for output in outputs]


def _element_state(
    record: ElementRecord,
    visible: bool,
    transform: TechniqueOutput,
    layout_y: float,
    item_transforms: List[ItemTransform],
) -> ElementState:
    return ElementState(
        id=record.id,
        kind=record.kind.model_copy(),
        content=record.content,
        items=list(record.items),
        visible=visible,
        opacity=transform.opacity,
        translate_x=transform.translate_x,
        translate_y=transform.translate_y,
        scale=transform.scale,
        rotation=transform.rotation,
        layout_y=layout_y,
        item_transforms=item_transforms,
    )
