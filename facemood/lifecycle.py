# facemood/lifecycle.py
from __future__ import annotations
from typing import Callable, Optional
import asyncio
import logging
import time

from facemood.camera import CameraStream, open_camera
from facemood.config import Settings
from facemood.engine import AnalysisEngine, ModelLoader
from facemood.errors import CameraUnavailableError, LifecycleError, ModelLoadError
from facemood.loop import DetectionLoop, Liveness
from facemood.models import LIFECYCLE_ORDER, LifecycleState, LiveStatus, LoopState
from facemood.visual import VideoSurface

logger = logging.getLogger(__name__)


class LifecycleController:
    """
    Owns one camera stream and at most one DetectionLoop.

    activate(): camera -> video surface -> models (if needed) -> loop.
    deactivate(): stop scheduling, release the camera. Final for this instance;
    build a new controller to start again.
    """
    def __init__(
        self,
        settings: Settings,
        set_emotion: Callable[[str], None],
        on_running: Optional[Callable[[], None]] = None,
        on_video_stream: Optional[Callable[[CameraStream], None]] = None,
        engine: Optional[AnalysisEngine] = None,
        loader: Optional[ModelLoader] = None,
        surface: Optional[VideoSurface] = None,
        sleep=asyncio.sleep,
    ):
        self.s = settings
        self.set_emotion = set_emotion
        self.on_running = on_running
        self.on_video_stream = on_video_stream
        self.engine = engine or AnalysisEngine(settings)
        self.loader = loader or ModelLoader(self.engine)
        self.surface = surface or VideoSurface(settings.layout())
        self.liveness = Liveness()
        self.state = LifecycleState.MOUNTED_IDLE
        self.stream: Optional[CameraStream] = None
        self.loop: Optional[DetectionLoop] = None
        self.started_at: Optional[float] = None
        self._task: Optional[asyncio.Task] = None
        self._activated = False
        self._failed = False
        self._sleep = sleep

    # ---- state ----
    def _transition(self, new: LifecycleState) -> None:
        if self.state is LifecycleState.UNMOUNTED:
            raise LifecycleError(f"Cannot enter {new.value}: controller is unmounted")
        if LIFECYCLE_ORDER.index(new) <= LIFECYCLE_ORDER.index(self.state):
            raise LifecycleError(f"Invalid transition {self.state.value} -> {new.value}")
        logger.debug(f"[lifecycle] {self.state.value} -> {new.value}")
        self.state = new

    @property
    def unmounted(self) -> bool:
        return self.state is LifecycleState.UNMOUNTED

    # ---- lifecycle ----
    async def activate(self) -> None:
        """
        Acquire the camera, load models if needed and start the detection loop.

        Raises:
            CameraUnavailableError: camera denied or missing; nothing is left running.
            ModelLoadError: a model failed to load; the camera is released, the loop never starts.
            LifecycleError: the controller was already deactivated or an earlier activation failed.
        """
        if self.unmounted:
            raise LifecycleError("Deactivated controllers cannot be restarted")
        if self._failed:
            raise LifecycleError("Activation already failed; build a new controller to retry")
        if self._activated:
            logger.warning("[lifecycle] activate() called twice; ignoring")
            return
        self._activated = True

        try:
            stream = await open_camera(self.s.CAMERA_INDEX)
        except CameraUnavailableError:
            self._failed = True
            raise
        if self.unmounted:
            stream.release()
            return
        self.stream = stream
        self.surface.attach(stream)
        if self.on_video_stream:
            self.on_video_stream(stream)

        if not self.loader.ready:
            self._transition(LifecycleState.MODELS_LOADING)
            try:
                await self.loader.load()
            except ModelLoadError:
                logger.exception("[lifecycle] model load failed; loop will not start")
                self._failed = True
                self._release()
                raise
            if self.unmounted:
                return
        self._transition(LifecycleState.MODELS_READY)

        self.loop = DetectionLoop(
            self.engine,
            self.surface,
            self.liveness,
            set_emotion=self.set_emotion,
            on_running=self.on_running,
            sleep=self._sleep,
        )
        self._task = asyncio.create_task(self.loop.run())
        self._task.add_done_callback(self._on_loop_done)
        self.started_at = time.time()
        self._transition(LifecycleState.LOOP_RUNNING)

    def deactivate(self) -> None:
        if self.unmounted:
            return
        self.liveness.clear()
        self._release()
        logger.debug(f"[lifecycle] {self.state.value} -> unmounted")
        self.state = LifecycleState.UNMOUNTED
        logger.info("[lifecycle] face sensor unmounted")

    async def wait(self) -> None:
        """Wait for the loop to finish; re-raises whatever ended it."""
        if self._task is not None:
            await self._task

    def status(self) -> LiveStatus:
        emotion = self.loop.selector.state if self.loop else None
        return LiveStatus(
            running=self.state is LifecycleState.LOOP_RUNNING,
            state=self.state,
            loop=self.loop.state if self.loop else LoopState.IDLE,
            emotion=emotion.label if emotion else None,
            confidence=emotion.confidence if emotion else 0.0,
            started_at=self.started_at,
        )

    # ---- helpers ----
    def _release(self) -> None:
        self.surface.detach()
        if self.stream is not None:
            self.stream.release()

    def _on_loop_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        err = task.exception()
        if err is not None:
            logger.error(f"[lifecycle] detection loop failed: {err!r}")
            # a failed loop unmounts the controller and frees the camera
            self.deactivate()
