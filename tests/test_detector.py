import itertools

import numpy as np
import pytest
from PIL import Image

from helpers import ARTWORK, WHITE, holed_frame, marker_frame
from stripbooth.models.strip import Orientation
from stripbooth.strip.detector import (
    SLOT_POLICIES,
    DetectionPolicy,
    RegionDetector,
    bleeding_windows,
    border_reachable,
    finalize_region,
    marker_mask,
    order_regions,
)
from stripbooth.strip.errors import UnsupportedPhotoCount
from stripbooth.strip.geometry import Region, RegionBounds


def assert_disjoint(regions):
    for a, b in itertools.combinations(regions, 2):
        assert not a.intersects(b)


def test_marker_mask_thresholds():
    pixels = np.array(
        [[[0, 200, 0, 255], [100, 149, 0, 255], [0, 100, 0, 255], [80, 121, 80, 255], [255, 255, 255, 255]]],
        dtype=np.uint8,
    )
    assert marker_mask(pixels, DetectionPolicy()).tolist() == [[True, False, False, True, False]]


def test_landscape_marker_frame(landscape_marker_frame):
    detection = RegionDetector().detect(landscape_marker_frame, 2, Orientation.landscape)

    assert detection.used_marker_mode
    assert len(detection.regions) == 2
    left, right = detection.regions
    assert left.center_x == pytest.approx(400, abs=1)
    assert right.center_x == pytest.approx(1200, abs=1)
    assert left.center_y == pytest.approx(400, abs=1)
    assert left.width == pytest.approx(399 * 1.2)
    assert left.height == pytest.approx(299 * 1.2)
    assert_disjoint(detection.regions)


def test_landscape_orientation_inferred_from_frame(landscape_marker_frame):
    detection = RegionDetector().detect(landscape_marker_frame, 2)

    assert detection.orientation is Orientation.landscape
    assert detection.regions[0].center_x < detection.regions[1].center_x


def test_portrait_two_photo_marker_frame():
    frame = marker_frame((800, 1600), [(150, 1000, 649, 1399), (150, 200, 649, 599)])

    detection = RegionDetector().detect(frame, 2)

    assert detection.orientation is Orientation.portrait
    top, bottom = detection.regions
    assert top.center_y == pytest.approx(399.5)
    assert bottom.center_y == pytest.approx(1199.5)
    # 5% side margins cap the width
    assert top.width <= 800 * 0.9


def test_three_band_transparency_frame(three_band_frame):
    detection = RegionDetector().detect(three_band_frame, 3, Orientation.portrait)

    assert not detection.used_marker_mode
    assert len(detection.regions) == 3
    centers = [region.center_y for region in detection.regions]
    assert centers == sorted(centers)
    assert centers[0] < centers[1] < centers[2]
    assert_disjoint(detection.regions)
    for region in detection.regions:
        assert region.width <= 900 * 0.9


def test_enclosed_holes_ignore_transparent_border():
    frame = holed_frame((600, 1200), [(100, 100, 499, 499), (100, 700, 499, 1099)])
    ring = np.array(frame)
    ring[:10, :, 3] = 0
    ring[-10:, :, 3] = 0
    ring[:, :10, 3] = 0
    ring[:, -10:, 3] = 0
    frame = Image.fromarray(ring, "RGBA")

    detection = RegionDetector().detect(frame, 2)

    assert not detection.used_marker_mode
    top, bottom = detection.regions
    assert (top.center_x, top.center_y) == (299.5, 299.5)
    assert (bottom.center_x, bottom.center_y) == (299.5, 899.5)
    assert top.height == pytest.approx(399 * 1.2)


def test_border_reachable_marks_only_edge_components():
    transparent = np.zeros((7, 7), dtype=bool)
    transparent[0, 0:3] = True
    transparent[1, 2] = True
    transparent[3:5, 3:5] = True

    reachable = border_reachable(transparent)

    assert reachable[0, 0] and reachable[1, 2]
    assert not reachable[3:5, 3:5].any()


def test_opaque_frame_without_markers_finds_nothing():
    frame = Image.new("RGBA", (1000, 1000), WHITE)

    detection = RegionDetector().detect(frame, 2)

    assert detection.regions == []
    assert not detection.used_marker_mode


def test_few_markers_fall_through_to_transparency():
    # 20x20 = 400 marker pixels, below the default gate
    frame = marker_frame((800, 800), [(100, 100, 119, 119)])

    detection = RegionDetector().detect(frame, 2)

    assert detection.marker_pixels == 400
    assert not detection.used_marker_mode
    assert detection.regions == []


def test_marker_gate_is_inclusive_and_configurable():
    frame = marker_frame((800, 800), [(100, 100, 139, 124)])  # exactly 1000 pixels

    assert RegionDetector().detect(frame, 2).used_marker_mode
    assert not RegionDetector(DetectionPolicy(min_marker_pixels=1001)).detect(frame, 2).used_marker_mode


def test_four_photo_marker_frame_stays_in_quarters():
    boxes = [(60, q * 500 + 60, 539, q * 500 + 439) for q in range(4)]
    frame = marker_frame((600, 2000), boxes)

    detection = RegionDetector().detect(frame, 4, Orientation.portrait)

    assert detection.used_marker_mode
    assert len(detection.regions) == 4
    assert_disjoint(detection.regions)
    for index, region in enumerate(detection.regions):
        assert index * 500 <= region.top < region.bottom <= (index + 1) * 500


def test_markers_straddling_band_edges_never_overlap():
    frame = marker_frame((900, 1800), [(100, 100, 799, 400), (100, 500, 799, 700), (100, 800, 799, 1700)])

    detection = RegionDetector().detect(frame, 3)

    assert len(detection.regions) == 3
    assert_disjoint(detection.regions)


def test_missing_slot_returns_partial_result():
    frame = marker_frame((900, 1800), [(100, 100, 799, 500), (100, 700, 799, 1100)])

    detection = RegionDetector().detect(frame, 3)

    assert len(detection.regions) == 2


def test_unsupported_photo_count():
    with pytest.raises(UnsupportedPhotoCount):
        RegionDetector().detect(Image.new("RGBA", (10, 10)), 5)


def test_finalize_region_prefers_no_overlap_over_minimum_size():
    bounds = RegionBounds(min_x=0, max_x=599, min_y=0, max_y=499, count=1)

    region = finalize_region(bounds, 0, 600, 2000, 4, True, SLOT_POLICIES[(4, True)], 0.05)

    assert region.top >= 60 - 1e-9
    assert region.bottom <= 440 + 1e-9
    assert region.width == pytest.approx(540)


def test_order_regions():
    left = Region(100, 50, 10, 10)
    right = Region(300, 50, 10, 10)
    assert order_regions([right, left], 2, portrait=False) == [left, right]
    assert order_regions([left, right], 2, portrait=True) == [left, right]

    regions = [Region(50, y, 10, 10) for y in (500, 100, 300)]
    assert [r.center_y for r in order_regions(regions, 3, portrait=True)] == [100, 300, 500]
    assert order_regions(regions[:2], 3, portrait=True) == regions[:2]


def ringed_frame(size, thickness):
    pixels = np.array(Image.new("RGBA", size, ARTWORK))
    pixels[:thickness, :, 3] = 0
    pixels[-thickness:, :, 3] = 0
    pixels[:, :thickness, 3] = 0
    pixels[:, -thickness:, 3] = 0
    return Image.fromarray(pixels, "RGBA")


@pytest.mark.parametrize("photo_count", [2, 3, 4])
def test_transparent_outer_ring_is_not_a_window(photo_count):
    detection = RegionDetector().detect(ringed_frame((1000, 1000), 10), photo_count)

    assert not detection.used_marker_mode
    assert detection.regions == []


def test_transparent_rounded_corners_are_not_windows():
    pixels = np.array(Image.new("RGBA", (800, 1600), ARTWORK))
    for ys, xs in itertools.product((slice(0, 40), slice(-40, None)), repeat=2):
        pixels[ys, xs, 3] = 0
    frame = Image.fromarray(pixels, "RGBA")

    assert RegionDetector().detect(frame, 2).regions == []


def test_bleeding_windows_keep_only_band_wide_cuts():
    transparent = np.zeros((12, 6), dtype=bool)
    transparent[1:4, :] = True  # crosses the frame inside band 0
    transparent[5:8, :] = True  # straddles bands 0 and 1
    transparent[9:11, 0:3] = True  # touches only the left edge

    windows = bleeding_windows(transparent, 2, portrait=True)

    assert windows[1:4].all()
    assert not windows[5:].any()


def test_landscape_windows_bleeding_top_to_bottom():
    frame = holed_frame((1600, 800), [(100, 0, 699, 799), (900, 0, 1499, 799)])

    left, right = RegionDetector().detect(frame, 2).regions

    assert (left.center_x, right.center_x) == (399.5, 1199.5)


def test_two_photo_landscape_transparency_frame():
    frame = holed_frame((1600, 800), [(1000, 250, 1399, 549), (200, 250, 599, 549)])

    detection = RegionDetector().detect(frame, 2)

    assert not detection.used_marker_mode
    assert detection.orientation is Orientation.landscape
    left, right = detection.regions
    assert (left.center_x, left.center_y) == (399.5, 399.5)
    assert right.center_x == 1199.5
    assert left.width == pytest.approx(399 * 1.2)
    assert left.height == pytest.approx(299 * 1.2)
    assert_disjoint(detection.regions)


@pytest.mark.parametrize(
    "top, bottom, expected_height",
    [
        (100, 399, 299 * 0.95),  # grown by the expansion factor
        (10, 489, 349),  # held back by the 15% gap margin
        (20, 260, 130),  # off-centre: overlap prevention beats the minimum size
    ],
)
def test_four_window_transparency_frame(top, bottom, expected_height):
    boxes = [(60, q * 500 + top, 539, q * 500 + bottom) for q in range(4)]
    frame = holed_frame((600, 2000), boxes)

    detection = RegionDetector().detect(frame, 4)

    assert not detection.used_marker_mode
    assert len(detection.regions) == 4
    assert_disjoint(detection.regions)
    for index, region in enumerate(detection.regions):
        assert region.height == pytest.approx(expected_height)
        assert region.width == pytest.approx(479 * 0.95)
        assert region.top >= index * 500 + 75 - 1e-9
        assert region.bottom <= index * 500 + 425 + 1e-9
