"""
Camera access through OpenCV.
"""
from __future__ import annotations
from typing import Optional
import asyncio
import logging

import cv2
import numpy as np

from facemood.errors import CameraUnavailableError
from facemood.models import Dimensions

logger = logging.getLogger(__name__)


class CameraStream:
    """An opened capture device; owned by exactly one controller."""
    def __init__(self, cap, index: int):
        self._cap = cap
        self.index = index
        self.released = False

    def read(self) -> Optional[np.ndarray]:
        if self.released:
            return None
        ok, frame = self._cap.read()
        if not ok or frame is None:
            return None
        return frame

    @property
    def size(self) -> Dimensions:
        w = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH) or 0)
        h = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT) or 0)
        return Dimensions(width=w, height=h)

    def release(self) -> None:
        if self.released:
            return
        self.released = True
        self._cap.release()
        logger.debug(f"[camera] released index={self.index}")


async def open_camera(index: int) -> CameraStream:
    """
    Acquire the camera at `index`.

    Raises:
        CameraUnavailableError: the device is missing, busy or access was denied.
    """
    logger.debug(f"[camera] opening index={index}")
    cap = await asyncio.to_thread(cv2.VideoCapture, index)
    if not cap.isOpened():
        cap.release()
        raise CameraUnavailableError(f"Could not open camera index {index}")
    return CameraStream(cap, index)
