import pytest
from PIL import Image

from helpers import holed_frame, marker_frame


@pytest.fixture
def landscape_marker_frame() -> Image.Image:
    return marker_frame((1600, 800), [(200, 250, 599, 549), (1000, 250, 1399, 549)])


@pytest.fixture
def three_band_frame() -> Image.Image:
    return holed_frame((900, 1800), [(0, 0, 899, 579), (0, 620, 899, 1179), (0, 1220, 899, 1799)])
