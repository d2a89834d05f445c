"""
Configuration for the emotion sensor.
"""
from pydantic import BaseModel
import os


def _env_flag(name: str, default: str = "0") -> bool:
    return (os.getenv(name, default) or default).strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str) -> int | None:
    raw = os.getenv(name)
    return int(raw) if raw else None


class Settings(BaseModel):
    """
    Runtime settings with environment-variable overrides.
    """
    CAMERA_INDEX: int = int(os.getenv("CAMERA_INDEX", "0"))
    MODEL_DIR: str = os.getenv("MODEL_DIR", os.path.join(os.path.expanduser("~"), ".facemood"))
    DETECTOR_BACKEND: str = os.getenv("DETECTOR_BACKEND", "opencv")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Layout only; none of these change the detection loop.
    MOBILE: bool = _env_flag("MOBILE")
    NO_CENTER: bool = _env_flag("NO_CENTER")
    WIDTH: int | None = _env_int("WIDTH")
    HEIGHT: int | None = _env_int("HEIGHT")
    # preview window width; the video is centered in it unless NO_CENTER
    CANVAS_WIDTH: int | None = _env_int("CANVAS_WIDTH") or 1280

    def __init__(self, **data):
        super().__init__(**data)
        # Normalize LOG_LEVEL to a name logging understands
        level = (self.LOG_LEVEL or "INFO").strip().split()[0].upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            level = "INFO"
        object.__setattr__(self, "LOG_LEVEL", level)

    def layout(self):
        from facemood.visual import LayoutOptions
        return LayoutOptions(mobile=self.MOBILE, no_center=self.NO_CENTER,
                             width=self.WIDTH, height=self.HEIGHT,
                             canvas_width=self.CANVAS_WIDTH)
