"""
CLI that prints confirmed emotion changes as JSON lines.
"""
from __future__ import annotations
import argparse, asyncio, json, logging, sys, time
from facemood.config import Settings
from facemood.lifecycle import LifecycleController


def emit(label: str) -> None:
    print(json.dumps({"time": round(time.time(), 3), "emotion": label}, ensure_ascii=False), flush=True)


async def run(settings: Settings, seconds: float | None) -> None:
    controller = LifecycleController(
        settings,
        set_emotion=emit,
        on_running=lambda: print("✅ Face detected, sensor running", file=sys.stderr),
    )
    await controller.activate()
    try:
        if seconds:
            await asyncio.sleep(seconds)
        else:
            await controller.wait()
    finally:
        controller.deactivate()


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--camera-index", type=int, default=None, help="Camera to open")
    p.add_argument("--seconds", type=float, default=None, help="Stop after this many seconds")
    args = p.parse_args()

    settings = Settings(CAMERA_INDEX=args.camera_index) if args.camera_index is not None else Settings()
    logging.basicConfig(level=settings.LOG_LEVEL)
    try:
        asyncio.run(run(settings, args.seconds))
    except KeyboardInterrupt:
        pass

if __name__ == "__main__":
    main()
