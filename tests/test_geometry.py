
import pytest
from facemood.geometry import mirror_box, unmirror, match_dimensions, resize_detection
from facemood.models import Box, Detection, Dimensions

def test_mirror_box_display_and_corners():
    m = mirror_box(Box.from_region(10, 20, 30, 40), 100)
    assert (m.x, m.y, m.width, m.height) == (60, 20, 30, 40)
    assert (m.top_left.x, m.top_left.y) == (60, 20)
    assert (m.top_right.x, m.top_right.y) == (90, 20)
    assert (m.bottom_left.x, m.bottom_left.y) == (60, 60)
    assert (m.bottom_right.x, m.bottom_right.y) == (90, 60)

def test_mirror_box_keeps_area_and_bottom():
    box = Box.from_region(5, 7, 11, 13)
    m = mirror_box(box, 50)
    assert m.area == box.area
    assert m.bottom == box.bottom

def test_mirror_box_native_fields_use_native_width():
    box = Box(x=20, y=10, width=40, height=40,
              native_x=40, native_y=20, native_width=80, native_height=80)
    m = mirror_box(box, 200, native_frame_width=400)
    assert m.x == 140
    assert m.native_x == 280
    assert (m.native_y, m.native_width, m.native_height) == (20, 80, 80)

@pytest.mark.parametrize("x,y,w,h,frame_w", [
    (0, 0, 10, 10, 100),
    (90, 5, 10, 20, 100),
    (33.5, 12.25, 17, 8, 64),
])
def test_mirror_twice_is_identity(x, y, w, h, frame_w):
    box = Box.from_region(x, y, w, h)
    once = mirror_box(box, frame_w)
    back = unmirror(once, frame_w)
    assert back == box
    assert mirror_box(back, frame_w) == once

def test_match_dimensions_falls_back_to_frame():
    frame = Dimensions(width=640, height=480)
    assert match_dimensions(frame, None) == frame
    assert match_dimensions(frame, (320, None)) == Dimensions(width=320, height=480)
    assert match_dimensions(frame, Dimensions(width=100, height=50)) == Dimensions(width=100, height=50)

def test_resize_detection_scales_display_box_only():
    det = Detection(box=Box.from_region(100, 50, 200, 100), expressions={"happy": 0.9},
                    image=Dimensions(width=640, height=480))
    out = resize_detection(det, Dimensions(width=320, height=240))
    b = out.box
    assert (b.x, b.y, b.width, b.height) == (50, 25, 100, 50)
    assert (b.native_x, b.native_y, b.native_width, b.native_height) == (100, 50, 200, 100)
    assert out.image == det.image
    assert resize_detection(det, Dimensions(width=640, height=480)) is det
