
"""Run the live mirrored preview with the face overlay.

Usage:
    uvicorn api.main:app --reload  # (separate, for API)
    python scripts/live_overlay.py [--camera-index 0] [--mobile] [--width 640 --height 480] [--no-center] [--canvas-width 1280]

Press 'q' to quit the window.
"""
from __future__ import annotations
import argparse, asyncio, logging
import cv2

from facemood.config import Settings
from facemood.lifecycle import LifecycleController
from facemood.models import LifecycleState
from facemood.visual import compose_view

logger = logging.getLogger("live_overlay")

FRAME_DELAY = 1 / 30.0


async def run(settings: Settings) -> None:
    controller = LifecycleController(
        settings,
        set_emotion=lambda em: logger.info(f"emotion: {em}"),
        on_running=lambda: logger.info("face detection running"),
    )
    await controller.activate()
    try:
        while controller.state is LifecycleState.LOOP_RUNNING:
            view = compose_view(controller.surface)
            if view is not None:
                cv2.imshow("Face Mood (q to quit)", view)
            if (cv2.waitKey(1) & 0xFF) == ord("q"):
                break
            await asyncio.sleep(FRAME_DELAY)
    finally:
        controller.deactivate()
        cv2.destroyAllWindows()
    await controller.wait()


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--camera-index", type=int, default=None, help="Camera to open")
    p.add_argument("--mobile", action="store_true", help="Narrow preview for small screens")
    p.add_argument("--width", type=int, default=None, help="Fixed preview width (needs --height)")
    p.add_argument("--height", type=int, default=None, help="Fixed preview height (needs --width)")
    p.add_argument("--no-center", action="store_true", help="Do not center the preview")
    p.add_argument("--canvas-width", type=int, default=None, help="Window width the preview is placed in")
    args = p.parse_args()

    overrides = {"MOBILE": args.mobile, "NO_CENTER": args.no_center,
                 "WIDTH": args.width, "HEIGHT": args.height}
    if args.camera_index is not None:
        overrides["CAMERA_INDEX"] = args.camera_index
    if args.canvas_width is not None:
        overrides["CANVAS_WIDTH"] = args.canvas_width
    s = Settings(**overrides)
    logging.basicConfig(level=s.LOG_LEVEL)
    asyncio.run(run(s))


if __name__ == '__main__':
    main()
