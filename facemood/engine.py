"""
DeepFace-backed analysis engine and one-time model loading.

DeepFace is imported lazily so tests can swap it through sys.modules and so the
tensorflow stack is only pulled in once the sensor actually starts.
"""
# facemood/engine.py
from __future__ import annotations
from typing import Dict, List, Optional
import asyncio
import logging
import os
import time

import numpy as np

from facemood.config import Settings
from facemood.errors import ModelLoadError
from facemood.models import Box, Detection, Dimensions, ModelBundle

logger = logging.getLogger(__name__)

# Loaded in this order, one at a time
CAPABILITIES = ("face_detector", "age_gender", "emotion")

# DeepFace label -> reported label
LABELS = {
    "neutral": "neutral",
    "happy": "happy",
    "sad": "sad",
    "surprise": "surprised",
    "angry": "angry",
    "disgust": "disgusted",
    "fear": "fearful",
}

_bundle: Optional[ModelBundle] = None


def normalize_expressions(raw: Dict) -> Dict[str, float]:
    """Map DeepFace labels onto the reported set and scale percentages to [0, 1]."""
    if not isinstance(raw, dict):
        return {}
    values = {}
    for k, v in raw.items():
        label = LABELS.get(str(k).lower())
        if label is None:
            continue
        values[label] = float(v)
    # DeepFace reports percentages; tolerate engines that already give [0, 1]
    scale = 100.0 if any(v > 1.0 for v in values.values()) else 1.0
    return {k: max(0.0, min(1.0, v / scale)) for k, v in values.items()}


class AnalysisEngine:
    """Thin adapter over DeepFace: per-capability loading and single-face detection."""
    def __init__(self, settings: Settings):
        self.s = settings

    def use_model_dir(self) -> None:
        os.makedirs(self.s.MODEL_DIR, exist_ok=True)
        os.environ["DEEPFACE_HOME"] = self.s.MODEL_DIR

    def load_capability(self, name: str) -> None:
        from deepface import DeepFace

        if name == "face_detector":
            DeepFace.build_model(self.s.DETECTOR_BACKEND, task="face_detector")
        elif name == "age_gender":
            DeepFace.build_model("Age", task="facial_attribute")
            DeepFace.build_model("Gender", task="facial_attribute")
        elif name == "emotion":
            DeepFace.build_model("Emotion", task="facial_attribute")
        else:
            raise ValueError(f"Unknown capability: {name}")

    def _valid_face(self, r: Dict, frame_w: int, frame_h: int) -> bool:
        reg = (r or {}).get("region") or {}
        w = int(reg.get("w", 0)); h = int(reg.get("h", 0))
        if w <= 0 or h <= 0:
            return False
        # without enforce_detection DeepFace falls back to the whole frame at confidence 0
        conf = r.get("face_confidence")
        if conf is not None and float(conf) <= 0.0:
            return False
        return not (w >= frame_w and h >= frame_h)

    def detect_sync(self, frame: np.ndarray) -> Optional[Detection]:
        """Analyze one BGR frame; None when no face is found."""
        from deepface import DeepFace

        frame_h, frame_w = frame.shape[:2]
        res = DeepFace.analyze(
            frame,
            actions=["emotion"],
            enforce_detection=False,
            detector_backend=self.s.DETECTOR_BACKEND,
            silent=True,
        )
        res = res if isinstance(res, list) else [res]
        faces: List[Dict] = [r for r in res if self._valid_face(r, frame_w, frame_h)]
        logger.debug(f"[engine] faces_detected={len(faces)}")
        if not faces:
            return None

        # single-face mode: keep the most prominent one
        r0 = max(faces, key=lambda r: int(r["region"].get("w", 0)) * int(r["region"].get("h", 0)))
        reg = r0["region"]
        box = Box.from_region(int(reg.get("x", 0)), int(reg.get("y", 0)),
                              int(reg.get("w", 0)), int(reg.get("h", 0)))
        return Detection(
            box=box,
            expressions=normalize_expressions(r0.get("emotion")),
            image=Dimensions(width=frame_w, height=frame_h),
        )

    async def detect(self, frame: np.ndarray) -> Optional[Detection]:
        return await asyncio.to_thread(self.detect_sync, frame)


class ModelLoader:
    """Loads the engine's capabilities once per process."""
    def __init__(self, engine: AnalysisEngine):
        self.engine = engine

    @property
    def ready(self) -> bool:
        return _bundle is not None

    async def load(self) -> ModelBundle:
        """
        Load face localization, age/gender and expression models sequentially.

        Raises:
            ModelLoadError: any sub-load failed; nothing is cached.
        """
        global _bundle
        if _bundle is not None:
            return _bundle

        self.engine.use_model_dir()
        for name in CAPABILITIES:
            logger.debug(f"[engine] loading capability={name} from {self.engine.s.MODEL_DIR}")
            try:
                await asyncio.to_thread(self.engine.load_capability, name)
            except Exception as e:
                logger.error(f"[engine] capability {name} failed to load: {e}")
                raise ModelLoadError(f"Failed to load {name} model") from e

        _bundle = ModelBundle(
            detector_backend=self.engine.s.DETECTOR_BACKEND,
            capabilities=CAPABILITIES,
            loaded_at=time.time(),
        )
        logger.info("[engine] models loaded")
        return _bundle
