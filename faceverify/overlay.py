"""Drawing utilities for visualizing located face regions.

Regions are found on the square edge map, so boxes are scaled back to the
frame before drawing.
"""

from __future__ import annotations

from typing import Optional, Tuple

import cv2
import numpy as np

from faceverify.interfaces import Region


# Color palette (BGR format for OpenCV)
COLOR_GREEN = (0, 255, 0)
COLOR_RED = (0, 0, 255)
COLOR_YELLOW = (0, 255, 255)
COLOR_WHITE = (255, 255, 255)
COLOR_BLACK = (0, 0, 0)


def scale_region(
    region: Region,
    source_size: Tuple[int, int],
    target_size: Tuple[int, int],
) -> Tuple[int, int, int, int]:
    """Map a region from one image size to another.

    Args:
        region: Region in source coordinates
        source_size: (width, height) the region was found on
        target_size: (width, height) to draw on

    Returns:
        (x1, y1, x2, y2) inclusive box clipped to the target.

    Example:
        >>> x1, y1, x2, y2 = scale_region(face, (400, 400), (w, h))
    """
    sx = target_size[0] / source_size[0]
    sy = target_size[1] / source_size[1]

    x1 = int(region.x * sx)
    y1 = int(region.y * sy)
    x2 = int((region.x + region.width) * sx) - 1
    y2 = int((region.y + region.height) * sy) - 1

    x1 = max(0, min(x1, target_size[0] - 1))
    y1 = max(0, min(y1, target_size[1] - 1))
    x2 = max(x1, min(x2, target_size[0] - 1))
    y2 = max(y1, min(y2, target_size[1] - 1))
    return x1, y1, x2, y2


def draw_text(
    frame: np.ndarray,
    text: str,
    position: Tuple[int, int],
    color: Tuple[int, int, int] = COLOR_WHITE,
    font_scale: float = 0.6,
    thickness: int = 2,
    bg_color: Optional[Tuple[int, int, int]] = None,
) -> None:
    """Draw text with optional background on frame (in-place).

    Args:
        frame: Image to draw on (modified in-place)
        text: Text string to draw
        position: (x, y) position for bottom-left corner of text
        color: Text color in BGR (default: white)
        font_scale: Font size scale factor
        thickness: Text thickness in pixels
        bg_color: Optional background color for text box (BGR)
    """
    font = cv2.FONT_HERSHEY_SIMPLEX
    x, y = position

    if bg_color is not None:
        (text_width, text_height), baseline = cv2.getTextSize(
            text, font, font_scale, thickness
        )
        cv2.rectangle(
            frame,
            (x, y - text_height - baseline),
            (x + text_width, y + baseline),
            bg_color,
            -1,
        )

    cv2.putText(frame, text, (x, y), font, font_scale, color, thickness, cv2.LINE_AA)


def draw_region(
    frame: np.ndarray,
    region: Region,
    source_size: Optional[Tuple[int, int]] = None,
    label: Optional[str] = None,
    color: Tuple[int, int, int] = COLOR_GREEN,
    show_score: bool = True,
    thickness: int = 2,
) -> Tuple[int, int, int, int]:
    """Draw a face region box and label on frame (in-place).

    Args:
        frame: BGR image to draw on (modified in-place)
        region: Region to draw
        source_size: (width, height) of the map the region was found on;
            None means frame coordinates
        label: Optional label text
        color: Box and label color (BGR)
        show_score: Whether to append the face score
        thickness: Line thickness in pixels

    Returns:
        The drawn (x1, y1, x2, y2) box in frame coordinates.

    Example:
        >>> draw_region(frame, face, source_size=(400, 400), label="face")
    """
    frame_size = (frame.shape[1], frame.shape[0])
    box = scale_region(region, source_size or frame_size, frame_size)
    x1, y1, x2, y2 = box

    cv2.rectangle(frame, (x1, y1), (x2, y2), color, thickness)

    parts = []
    if label is not None:
        parts.append(label)
    if show_score:
        parts.append(f"{region.face_score:.2f}")

    if parts:
        # Below the box when there is no room above
        text_y = y1 - 10 if y1 - 10 >= 20 else min(y2 + 20, frame_size[1] - 1)
        draw_text(frame, " ".join(parts), (x1, text_y), color=color, bg_color=COLOR_BLACK)

    return box


def draw_status(
    frame: np.ndarray,
    text: str,
    ok: bool,
    position: Tuple[int, int] = (10, 30),
) -> None:
    """Draw a pass/fail status line (in-place)."""
    draw_text(
        frame,
        text,
        position,
        color=COLOR_GREEN if ok else COLOR_RED,
        font_scale=0.7,
        bg_color=COLOR_BLACK,
    )
