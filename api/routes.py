"""
REST endpoints for the live emotion sensor.
"""
from fastapi import APIRouter, HTTPException
import logging

from facemood.config import Settings
from facemood.errors import CameraUnavailableError, ModelLoadError
from facemood.lifecycle import LifecycleController
from facemood.models import LifecycleState, LiveStatus, LoopState


# one controller at a time; a stopped controller is replaced on the next start
live_session = {"controller": None}

router = APIRouter()
settings = Settings()
logger = logging.getLogger(__name__)


def make_controller(settings: Settings) -> LifecycleController:
    return LifecycleController(
        settings,
        set_emotion=lambda em: logger.info(f"[api] emotion -> {em}"),
        on_running=lambda: logger.info("[api] face detection running"),
    )


def _active():
    ctl = live_session["controller"]
    if ctl is None or ctl.state is LifecycleState.UNMOUNTED:
        return None
    return ctl


def stop_live_session() -> bool:
    ctl = _active()
    if ctl is None:
        return False
    ctl.deactivate()
    return True


@router.post("/live/start")
async def live_start():
    """
    Open the camera, load models if needed and start the detection loop.

    Returns:
        dict: {"status": "started" | "already_running"}
    """
    if _active() is not None:
        return {"status": "already_running"}

    ctl = make_controller(settings)
    live_session["controller"] = ctl
    logger.debug(f"[api] /live/start camera_index={settings.CAMERA_INDEX}")
    try:
        await ctl.activate()
    except CameraUnavailableError as e:
        ctl.deactivate()
        logger.error(f"[api] camera unavailable: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    except ModelLoadError as e:
        ctl.deactivate()
        logger.exception("[api] model load failed")
        raise HTTPException(status_code=500, detail=str(e))
    return {"status": "started"}


@router.get("/live/status", response_model=LiveStatus)
async def live_status():
    ctl = live_session["controller"]
    if ctl is None:
        return LiveStatus(running=False, state=LifecycleState.UNMOUNTED, loop=LoopState.IDLE)
    return ctl.status()


@router.post("/live/stop")
async def live_stop():
    if not stop_live_session():
        return {"status": "not_running"}
    return {"status": "stopped"}
