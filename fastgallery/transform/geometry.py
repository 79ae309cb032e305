"""Size arithmetic for full-size renditions and thumbnails."""
from __future__ import annotations


def fit_within(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Scale (width, height) to fit inside the max box, preserving aspect ratio.

    The scale factor is the largest that satisfies both bounds. Images already
    inside the box are left at their size.
    """
    scale = max_width / width
    if scale * height > max_height:
        scale = max_height / height
    scale = min(scale, 1.0)
    return max(1, round(width * scale)), max(1, round(height * scale))


def cover_and_crop(width: int, height: int, box_width: int, box_height: int) -> tuple[tuple[int, int], tuple[int, int, int, int]]:
    """Return the scaled size and centered crop box that fill a thumbnail box.

    A source wider than the box is scaled to the box height and its excess
    width is cropped evenly from both sides; a taller source is scaled to the
    box width and cropped top and bottom. Equal aspect ratios are only scaled.

    Returns:
        ((scaled_width, scaled_height), (left, upper, right, lower))
    """
    # Compare width/height against box_width/box_height without float error
    if width * box_height > box_width * height:
        scaled_height = box_height
        scaled_width = max(box_width, round(width * box_height / height))
    elif width * box_height < box_width * height:
        scaled_width = box_width
        scaled_height = max(box_height, round(height * box_width / width))
    else:
        return (box_width, box_height), (0, 0, box_width, box_height)

    left = (scaled_width - box_width) // 2
    upper = (scaled_height - box_height) // 2
    return (scaled_width, scaled_height), (left, upper, left + box_width, upper + box_height)
