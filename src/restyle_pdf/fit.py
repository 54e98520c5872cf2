from __future__ import annotations

import math

from .contracts import FitTransform
from .errors import InvalidPageSizeError


def _check_dimension(name: str, value: float) -> float:
    v = float(value)
    if not math.isfinite(v) or v <= 0:
        raise InvalidPageSizeError(f"{name} must be a positive, finite number of points, got {value!r}")
    return v


def compute_fit(
    source_width: float,
    source_height: float,
    target_width: float,
    target_height: float,
) -> FitTransform:
    """
    Contain-fit a source page into a target page, preserving aspect ratio.

    The scaled source never overflows the target; it is centered on both axes.
    Offsets are measured from the target page's lower-left corner, in points.
    """

    sw = _check_dimension("source_width", source_width)
    sh = _check_dimension("source_height", source_height)
    tw = _check_dimension("target_width", target_width)
    th = _check_dimension("target_height", target_height)

    scale = min(tw / sw, th / sh)
    scaled_w = sw * scale
    scaled_h = sh * scale

    return FitTransform(
        scale=scale,
        offset_x=(tw - scaled_w) / 2,
        offset_y=(th - scaled_h) / 2,
    )
