import numpy as np

from helpers import holed_frame, marker_frame
from stripbooth.strip.detector import DetectionPolicy
from stripbooth.strip.matting import key_out, matte


def test_key_out_clears_marker_alpha_only(landscape_marker_frame):
    before = np.array(landscape_marker_frame)

    layer, keyed = key_out(landscape_marker_frame)
    after = np.array(layer)

    assert keyed == 2 * 400 * 300
    assert after[300, 300, 3] == 0
    assert after[10, 10].tolist() == [255, 255, 255, 255]
    assert np.array_equal(after[..., :3], before[..., :3])
    # the source frame is left alone
    assert np.array_equal(np.array(landscape_marker_frame), before)


def test_matte_without_markers_is_a_no_op():
    frame = holed_frame((200, 300), [(20, 20, 179, 129)])

    layer = matte(frame, used_marker_mode=True)

    assert np.array_equal(np.array(layer), np.array(frame))


def test_matte_transparency_mode_returns_frame():
    frame = holed_frame((200, 300), [(20, 20, 179, 129)])

    assert matte(frame, used_marker_mode=False) is frame


def test_matte_uses_policy_thresholds():
    frame = marker_frame((50, 50), [(0, 0, 49, 24)])

    layer = matte(frame, True, DetectionPolicy(green_min=250))

    assert np.array(layer)[..., 3].min() == 255
