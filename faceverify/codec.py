"""OpenCV-based image codec service.

Implements the ImageCodec protocol: header reads through Pillow (which
reports the container format without decoding pixels), and decode, resize,
greyscale conversion, and 3x3 convolution through OpenCV.
"""

from __future__ import annotations

import io
from typing import Sequence

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from faceverify.errors import ValidationError
from faceverify.interfaces import ImageMetadata
from faceverify.logging_config import get_logger
from faceverify.utils import cover_crop_box

logger = get_logger(__name__)


class OpenCVImageCodec:
    """Image codec built on OpenCV and Pillow.

    Greyscale and RGB resizes both use cover semantics: the image is
    center-cropped to the target aspect ratio, then resized, so the output
    is filled without distortion.

    Example:
        >>> codec = OpenCVImageCodec()
        >>> meta = codec.decode_metadata(image_bytes)
        >>> grey = codec.resize_greyscale(image_bytes, 224, 224)
        >>> grey.shape
        (224, 224)
    """

    def __init__(self, interpolation: int = cv2.INTER_AREA):
        """Initialize codec.

        Args:
            interpolation: OpenCV interpolation used for resizing
        """
        self.interpolation = interpolation

    def decode_metadata(self, image_bytes: bytes) -> ImageMetadata:
        """Read width, height, and format from the image header.

        Raises:
            ValidationError: If the bytes are not a readable image.
        """
        try:
            with Image.open(io.BytesIO(image_bytes)) as img:
                width, height = img.size
                fmt = (img.format or "").lower()
        except (UnidentifiedImageError, OSError) as e:
            raise ValidationError(
                "Image appears to be corrupted or invalid. "
                "Please try uploading a different image.",
                size_bytes=len(image_bytes),
            ) from e

        logger.debug(f"Decoded metadata: {width}x{height}, format={fmt}")
        return ImageMetadata(width=width, height=height, format=fmt)

    def _decode(self, image_bytes: bytes) -> np.ndarray:
        """Decode bytes to a BGR image, dropping any alpha channel."""
        buf = np.frombuffer(image_bytes, dtype=np.uint8)
        image = cv2.imdecode(buf, cv2.IMREAD_COLOR)
        if image is None:
            raise ValidationError(
                "Unable to decode image pixels",
                size_bytes=len(image_bytes),
            )
        return image

    def _cover_resize(self, image: np.ndarray, width: int, height: int) -> np.ndarray:
        h, w = image.shape[:2]
        x1, y1, x2, y2 = cover_crop_box(w, h, width, height)
        crop = image[y1:y2, x1:x2]
        return cv2.resize(crop, (width, height), interpolation=self.interpolation)

    def resize_greyscale(self, image_bytes: bytes, width: int, height: int) -> np.ndarray:
        """Decode, cover-resize, and convert to greyscale.

        Returns:
            uint8 array of shape [height, width].
        """
        image = self._cover_resize(self._decode(image_bytes), width, height)
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)

    def resize_cover_rgb(self, image_bytes: bytes, width: int, height: int) -> np.ndarray:
        """Decode and cover-resize to RGB.

        Returns:
            uint8 array of shape [height, width, 3] in RGB channel order.
        """
        image = self._cover_resize(self._decode(image_bytes), width, height)
        return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)

    def convolve3x3(self, grey: np.ndarray, kernel: Sequence[float]) -> np.ndarray:
        """Convolve with a row-major 3x3 kernel, saturating to uint8.

        Negative responses clip to 0, responses above 255 clip to 255. Border
        pixels use OpenCV's default reflection and carry no meaning.
        """
        kernel_arr = np.asarray(kernel, dtype=np.float32)
        if kernel_arr.size != 9:
            raise ValueError(f"Expected 9 kernel weights, got {kernel_arr.size}")

        # filter2D correlates; flipping makes it a true convolution
        kernel_arr = np.flip(kernel_arr.reshape(3, 3))
        return cv2.filter2D(np.asarray(grey, dtype=np.uint8), -1, kernel_arr)

    def __repr__(self) -> str:
        return f"OpenCVImageCodec(interpolation={self.interpolation})"
