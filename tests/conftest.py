import pytest
import numpy as np

import facemood.engine as engine
from facemood.models import Box, Detection, Dimensions


@pytest.fixture(autouse=True)
def fresh_model_cache(monkeypatch):
    # the model bundle is cached per process; every test starts unloaded
    monkeypatch.setattr(engine, "_bundle", None)


@pytest.fixture
def blank_frame():
    return np.zeros((48, 64, 3), dtype=np.uint8)


@pytest.fixture
def make_detection():
    def _make(expressions, x=10, y=20, w=30, h=40, frame_w=64, frame_h=48):
        return Detection(
            box=Box.from_region(x, y, w, h),
            expressions=expressions,
            image=Dimensions(width=frame_w, height=frame_h),
        )
    return _make


class DummyStream:
    def __init__(self, frame=None):
        self.frame = np.zeros((48, 64, 3), dtype=np.uint8) if frame is None else frame
        self.released = False
        self.reads = 0

    def read(self):
        if self.released:
            return None
        self.reads += 1
        return self.frame.copy()

    def release(self):
        self.released = True


@pytest.fixture
def dummy_stream():
    return DummyStream()
