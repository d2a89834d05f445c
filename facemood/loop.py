# facemood/loop.py
"""
Cooperative detection loop.

Each iteration reads the current frame, runs the analysis engine on it, mirrors
the detected box for the preview and feeds the expression scores to the
EmotionSelector. The next iteration starts DETECTION_INTERVAL seconds after the
previous one finished; iterations never overlap.

Stopping is cooperative: the loop checks a Liveness token before every
inference call, after every inference call (a late result is dropped before it
touches any state) and before every reschedule.
"""
from __future__ import annotations
from typing import Callable, Optional
import asyncio
import logging

from facemood.geometry import mirror_box, resize_detection
from facemood.models import LoopState
from facemood.selector import EmotionSelector

logger = logging.getLogger(__name__)

DETECTION_INTERVAL = 0.05   # seconds between the end of one iteration and the next


class Liveness:
    """Cancellation token shared by a controller and its loop. Cleared once, never re-set."""
    def __init__(self):
        self.alive = True

    def clear(self) -> None:
        self.alive = False


class DetectionLoop:
    def __init__(
        self,
        engine,
        surface,
        liveness: Liveness,
        set_emotion: Callable[[str], None],
        on_running: Optional[Callable[[], None]] = None,
        selector: Optional[EmotionSelector] = None,
        sleep=asyncio.sleep,
    ):
        self.engine = engine
        self.surface = surface
        self.liveness = liveness
        self.set_emotion = set_emotion
        self.on_running = on_running
        self.selector = selector or EmotionSelector()
        self.state = LoopState.IDLE
        self.iterations = 0
        self._sleep = sleep

    async def step(self) -> bool:
        """Run one iteration (without the delay). Returns False when the loop must stop."""
        if not self.liveness.alive:
            return False

        frame = self.surface.capture()
        detection = await self.engine.detect(frame) if frame is not None else None
        self.iterations += 1

        if not self.liveness.alive:
            logger.debug("[loop] dropping result that completed after deactivation")
            return False
        if detection is None:
            logger.debug("[loop] no face in frame")
            return True

        if self.state is LoopState.IDLE:
            self.state = LoopState.RUNNING
            logger.info("[loop] first detection; loop running")
            if self.on_running:
                self.on_running()

        dims = self.surface.display_dimensions(detection.image)
        resized = resize_detection(detection, dims)
        mirrored = mirror_box(resized.box, dims.width, detection.image.width)
        self.surface.show(mirrored, detection.expressions)

        result = self.selector.update(detection.expressions)
        if result.changed:
            logger.info(f"[loop] emotion={result.label} confidence={result.confidence:.2f}")
            self.set_emotion(result.label)
        return True

    async def run(self) -> None:
        logger.info("[loop] starting face detection loop")
        while await self.step():
            if not self.liveness.alive:
                break
            await self._sleep(DETECTION_INTERVAL)
        logger.info(f"[loop] stopped after {self.iterations} iterations")
