"""
Pydantic data models shared by the sensor, the loop and the API.
"""
from __future__ import annotations
from enum import Enum
from typing import Dict, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

Emotion = Literal["neutral", "happy", "sad", "surprised", "angry", "disgusted", "fearful"]
EMOTIONS: Tuple[str, ...] = ("neutral", "happy", "sad", "surprised", "angry", "disgusted", "fearful")


class LifecycleState(str, Enum):
    UNMOUNTED = "unmounted"
    MOUNTED_IDLE = "mounted-idle"
    MODELS_LOADING = "models-loading"
    MODELS_READY = "models-ready"
    LOOP_RUNNING = "loop-running"


# forward order; UNMOUNTED is terminal and sits outside it
LIFECYCLE_ORDER = (
    LifecycleState.MOUNTED_IDLE,
    LifecycleState.MODELS_LOADING,
    LifecycleState.MODELS_READY,
    LifecycleState.LOOP_RUNNING,
)


class LoopState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)
    x: float
    y: float


class Dimensions(BaseModel):
    model_config = ConfigDict(frozen=True)
    width: int
    height: int


class Box(BaseModel):
    """Detection box in display space plus the same box at native camera resolution."""
    model_config = ConfigDict(frozen=True)
    x: float
    y: float
    width: float
    height: float
    native_x: float
    native_y: float
    native_width: float
    native_height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @classmethod
    def from_region(cls, x: float, y: float, width: float, height: float) -> "Box":
        """Box whose display and native representations coincide."""
        return cls(x=x, y=y, width=width, height=height,
                   native_x=x, native_y=y, native_width=width, native_height=height)


class MirroredBox(BaseModel):
    model_config = ConfigDict(frozen=True)
    x: float
    y: float
    width: float
    height: float
    native_x: float
    native_y: float
    native_width: float
    native_height: float
    area: float
    bottom: float
    top_left: Point
    top_right: Point
    bottom_left: Point
    bottom_right: Point


class Detection(BaseModel):
    """One inference result: the most prominent face and its expression scores."""
    model_config = ConfigDict(frozen=True)
    box: Box
    expressions: Dict[Emotion, float] = Field(default_factory=dict)
    image: Dimensions


class EmotionState(BaseModel):
    label: Optional[Emotion] = None
    confidence: float = 0.0
    confirmed: bool = False


class SelectionResult(BaseModel):
    label: str
    confidence: float
    changed: bool
    emotion: EmotionState


class ModelBundle(BaseModel):
    model_config = ConfigDict(frozen=True)
    detector_backend: str
    capabilities: Tuple[str, ...]
    loaded_at: float


class LiveStatus(BaseModel):
    running: bool
    state: LifecycleState
    loop: LoopState
    emotion: Optional[str] = None
    confidence: float = 0.0
    started_at: float | None = None
