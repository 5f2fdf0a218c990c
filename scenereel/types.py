from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# --- Timeline segments -------------------------------------------------------


class _SegmentBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    duration: float = Field(..., ge=0, allow_inf_nan=False, description="Length in seconds")


class NarrationSegment(_SegmentBase):
    type: Literal["narration"] = "narration"
    text: str


class AnimationSegment(_SegmentBase):
    type: Literal["animation"] = "animation"
    name: str


class SilenceSegment(_SegmentBase):
    type: Literal["silence"] = "silence"


class ClipSegment(_SegmentBase):
    type: Literal["clip"] = "clip"
    path: Path


Segment = Annotated[
    Union[NarrationSegment, AnimationSegment, SilenceSegment, ClipSegment],
    Field(discriminator="type"),
]


# --- Elements ----------------------------------------------------------------


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


class TitleKind(BaseModel):
    model_config = ConfigDict(frozen=True)
    type: Literal["title"] = "title"


class ShowKind(BaseModel):
    model_config = ConfigDict(frozen=True)
    type: Literal["show"] = "show"


class SectionKind(BaseModel):
    model_config = ConfigDict(frozen=True)
    type: Literal["section"] = "section"


class MetricKind(BaseModel):
    model_config = ConfigDict(frozen=True)
    type: Literal["metric"] = "metric"
    direction: Direction = Direction.NEUTRAL


class StepsKind(BaseModel):
    model_config = ConfigDict(frozen=True)
    type: Literal["steps"] = "steps"
    count: int = Field(..., ge=0)


ElementKind = Annotated[
    Union[TitleKind, ShowKind, SectionKind, MetricKind, StepsKind],
    Field(discriminator="type"),
]

HEADER_KINDS = (TitleKind, SectionKind)


class ElementRecord(BaseModel):
    """Metadata for one scripted element, minted by the scene facade."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=0)
    kind: ElementKind
    content: str = ""
    items: List[str] = Field(default_factory=list)
    created_at: float = Field(..., ge=0, description="Seconds on the timeline axis")
    anchor: int = Field(0, ge=0, description="Number of timeline segments when created")
    cleared_at: Optional[float] = Field(None, description="Clear time, if a later clear() retired it")
    cleared_anchor: Optional[int] = None

    def is_visible(self, t: float) -> bool:
        if self.created_at > t:
            return False
        return self.cleared_at is None or t < self.cleared_at


# --- Animation ---------------------------------------------------------------


class TechniqueOutput(BaseModel):
    model_config = ConfigDict(frozen=True)

    opacity: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0
    scale: float = 1.0
    rotation: float = Field(0.0, description="Rotation in degrees")


IDENTITY = TechniqueOutput()


# --- Frame snapshot (wire format) -------------------------------------------


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ItemTransform(_WireModel):
    opacity: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0
    scale: float = 1.0
    rotation: float = 0.0


class ElementState(_WireModel):
    id: int
    kind: ElementKind
    content: str
    items: List[str]
    visible: bool
    opacity: float
    translate_x: float
    translate_y: float
    scale: float
    rotation: float
    layout_y: float = Field(0.5, description="Vertical anchor: 0 top, 1 bottom")
    item_transforms: List[ItemTransform] = Field(default_factory=list)


class ThemeState(_WireModel):
    name: str
    css_properties: Dict[str, str]


class FrameState(_WireModel):
    time: float
    frame: int
    total_duration: float
    fps: int
    elements: List[ElementState]
    active_narration: Optional[str]
    theme: ThemeState

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, data: str) -> "FrameState":
        return cls.model_validate_json(data)


# --- Build configuration and results -----------------------------------------


class LayoutConfig(BaseModel):
    single: float = 0.5
    header: float = 0.3
    body: float = 0.65
    band_top: float = 0.2
    band_bottom: float = 0.8


class BuildConfig(BaseModel):
    output_path: Path
    width: int = Field(1920, gt=0)
    height: int = Field(1080, gt=0)
    crf: int = Field(23, ge=0, le=51)
    sample_rate: int = Field(48000, gt=0)
    keep_frames: bool = False
    work_dir: Optional[Path] = None
    layout: LayoutConfig = Field(default_factory=LayoutConfig)


class BuildResult(BaseModel):
    output_path: Path
    total_frames: int
    duration: float
    work_dir: Optional[Path] = Field(None, description="Kept working directory, when keep_frames is set")
