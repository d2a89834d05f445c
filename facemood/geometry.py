"""
Coordinate helpers for the mirrored preview.

- mirror_box: reflect a detection box across the vertical axis of the frame
- unmirror: the inverse reflection (same formula, same widths)
- match_dimensions / resize_detection: align detection coordinates with the rendered size

The preview shows the camera flipped horizontally, so a box detected on the raw
frame has to be reflected before it is drawn on top of it.
"""
from __future__ import annotations
from typing import Optional, Tuple

from facemood.models import Box, Detection, Dimensions, MirroredBox, Point


def mirror_box(box: Box, frame_width: float, native_frame_width: Optional[float] = None) -> MirroredBox:
    """Reflect `box` horizontally inside a frame `frame_width` pixels wide.

    Native fields are reflected with the same formula against
    `native_frame_width` (defaults to `frame_width`). Widths and heights,
    area and bottom edge are unchanged. `frame_width` is not checked against
    the frame the box came from; a wrong width gives a misplaced overlay.
    """
    native_w = frame_width if native_frame_width is None else native_frame_width
    x = frame_width - box.x - box.width
    y = box.y
    return MirroredBox(
        x=x,
        y=y,
        width=box.width,
        height=box.height,
        native_x=native_w - box.native_x - box.native_width,
        native_y=box.native_y,
        native_width=box.native_width,
        native_height=box.native_height,
        area=box.area,
        bottom=box.bottom,
        top_left=Point(x=x, y=y),
        top_right=Point(x=x + box.width, y=y),
        bottom_left=Point(x=x, y=y + box.height),
        bottom_right=Point(x=x + box.width, y=y + box.height),
    )


def unmirror(mirrored: MirroredBox, frame_width: float, native_frame_width: Optional[float] = None) -> Box:
    native_w = frame_width if native_frame_width is None else native_frame_width
    return Box(
        x=frame_width - mirrored.x - mirrored.width,
        y=mirrored.y,
        width=mirrored.width,
        height=mirrored.height,
        native_x=native_w - mirrored.native_x - mirrored.native_width,
        native_y=mirrored.native_y,
        native_width=mirrored.native_width,
        native_height=mirrored.native_height,
    )


def match_dimensions(frame: Dimensions, display: Tuple[Optional[int], Optional[int]] | Dimensions | None) -> Dimensions:
    """Size the overlay should be drawn at; missing components fall back to the frame size."""
    if display is None:
        return frame
    if isinstance(display, Dimensions):
        w, h = display.width, display.height
    else:
        w, h = display
    return Dimensions(width=int(w or frame.width), height=int(h or frame.height))


def resize_detection(detection: Detection, display: Dimensions) -> Detection:
    """Scale the display-space box from the detection's frame size to `display`.

    Native fields keep camera pixel coordinates.
    """
    src = detection.image
    if src.width <= 0 or src.height <= 0:
        return detection
    sx = display.width / float(src.width)
    sy = display.height / float(src.height)
    if sx == 1.0 and sy == 1.0:
        return detection
    b = detection.box
    box = b.model_copy(update={
        "x": b.x * sx,
        "y": b.y * sy,
        "width": b.width * sx,
        "height": b.height * sy,
    })
    return detection.model_copy(update={"box": box})
