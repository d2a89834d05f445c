
"""Preview surface & overlay drawing.

- VideoSurface: the attached camera stream, its latest frame and the latest overlay
- draw_overlay: mirror a frame and draw the (already mirrored) face box + expression labels
- compose_view: size and place the preview according to LayoutOptions

The detection loop is the only writer of a VideoSurface; rendering only reads it.
"""
from __future__ import annotations
from typing import Dict, Optional, Tuple
import cv2
import numpy as np
from pydantic import BaseModel

from facemood.geometry import match_dimensions
from facemood.models import Dimensions, MirroredBox

MIN_EXPRESSION_CONFIDENCE = 0.05
MOBILE_WIDTH_FRACTION = 0.4    # mobile preview is at most 40% of the viewport height wide


class LayoutOptions(BaseModel):
    mobile: bool = False
    no_center: bool = False
    width: Optional[int] = None
    height: Optional[int] = None
    viewport_height: int = 1080
    canvas_width: Optional[int] = None


def display_size(frame: Dimensions, layout: LayoutOptions) -> Dimensions:
    """Pixel size of the preview and overlay for a frame of size `frame`."""
    if layout.width and layout.height:
        return match_dimensions(frame, (layout.width, layout.height))
    w, h = frame.width, frame.height
    # no_center drops the mobile width cap
    if layout.mobile and not layout.no_center and w > 0:
        max_w = int(layout.viewport_height * MOBILE_WIDTH_FRACTION)
        if w > max_w:
            h = int(round(h * max_w / float(w)))
            w = max_w
    return Dimensions(width=w, height=h)


class VideoSurface:
    """Latest frame from the attached stream plus the overlay drawn on it."""
    def __init__(self, layout: Optional[LayoutOptions] = None):
        self.layout = layout or LayoutOptions()
        self.stream = None
        self.frame: Optional[np.ndarray] = None
        self.overlay: Optional[MirroredBox] = None
        self.expressions: Dict[str, float] = {}

    @property
    def attached(self) -> bool:
        return self.stream is not None

    def attach(self, stream) -> None:
        self.stream = stream

    def detach(self) -> None:
        self.stream = None

    def capture(self) -> Optional[np.ndarray]:
        if self.stream is None:
            return None
        frame = self.stream.read()
        if frame is not None:
            self.frame = frame
        return frame

    def display_dimensions(self, frame: Dimensions) -> Dimensions:
        return display_size(frame, self.layout)

    def show(self, mirrored: MirroredBox, expressions: Dict[str, float]) -> None:
        self.overlay = mirrored
        self.expressions = dict(expressions)


def draw_overlay(frame: np.ndarray,
                 mirrored: Optional[MirroredBox] = None,
                 expressions: Optional[Dict[str, float]] = None,
                 min_confidence: float = MIN_EXPRESSION_CONFIDENCE,
                 color: Tuple[int, int, int] = (0, 255, 0)) -> np.ndarray:
    """Flip `frame` horizontally and draw the mirrored box with its expression scores.

    Args:
        frame: BGR image at display size, as captured (not yet flipped)
        mirrored: box already in mirrored display coordinates
        expressions: label -> confidence; labels below `min_confidence` are skipped
        color: BGR color for the box and labels

    Returns:
        New annotated image
    """
    out = cv2.flip(frame, 1)
    if mirrored is None:
        return out
    h, w = out.shape[:2]

    x, y = int(mirrored.top_left.x), int(mirrored.top_left.y)
    x2, y2 = int(mirrored.bottom_right.x), int(mirrored.bottom_right.y)
    # clamp to image bounds
    x = max(0, min(x, w - 1)); y = max(0, min(y, h - 1))
    x2 = max(x, min(x2, w - 1)); y2 = max(y, min(y2, h - 1))
    cv2.rectangle(out, (x, y), (x2, y2), color, 2)

    ranked = sorted((expressions or {}).items(), key=lambda kv: kv[1], reverse=True)
    line_y = min(h - 5, y2 + 18)
    for label, conf in ranked:
        if conf < min_confidence:
            continue
        cv2.putText(out, f"{label} ({conf:.2f})", (x, line_y), cv2.FONT_HERSHEY_SIMPLEX, 0.5, color, 1, cv2.LINE_AA)
        line_y = min(h - 5, line_y + 18)
    return out


def compose_view(surface: VideoSurface) -> Optional[np.ndarray]:
    """Render the surface's latest frame as the user sees it; None before the first frame."""
    frame = surface.frame
    if frame is None:
        return None
    fh, fw = frame.shape[:2]
    dims = surface.display_dimensions(Dimensions(width=fw, height=fh))
    if (dims.width, dims.height) != (fw, fh):
        frame = cv2.resize(frame, (dims.width, dims.height), interpolation=cv2.INTER_AREA)
    view = draw_overlay(frame, surface.overlay, surface.expressions)

    layout = surface.layout
    canvas_w = layout.canvas_width or 0
    if canvas_w <= dims.width:
        return view
    pad = canvas_w - dims.width
    left = 0 if layout.no_center else pad // 2
    return cv2.copyMakeBorder(view, 0, 0, left, pad - left, cv2.BORDER_CONSTANT, value=(0, 0, 0))
