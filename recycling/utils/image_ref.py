"""
Image references
Encodes an image file as a compact JPEG data URI, the opaque reference
stored with each scan record
"""

import base64
import logging
from pathlib import Path

import cv2

logger = logging.getLogger(__name__)

DATA_URI_PREFIX = "data:image/jpeg;base64,"


def encode_image_file(image_path: str, max_dimension: int = 512,
                      jpeg_quality: int = 85) -> str:
    """
    Read an image file and turn it into a data URI

    Args:
        image_path: Path to any image format OpenCV can read
        max_dimension: Longest side of the stored image in pixels
        jpeg_quality: JPEG quality 0-100

    Returns:
        "data:image/jpeg;base64,..." string

    Raises:
        ValueError: if the file cannot be read or encoded as an image
    """
    path = Path(image_path)
    img = cv2.imread(str(path))
    if img is None:
        raise ValueError(f"Could not read image file: {path}")

    height, width = img.shape[:2]
    scale = max_dimension / float(max(height, width))
    if scale < 1.0:
        new_size = (max(1, int(round(width * scale))), max(1, int(round(height * scale))))
        img = cv2.resize(img, new_size, interpolation=cv2.INTER_AREA)
        logger.debug(f"Resized {path.name} from {width}x{height} to {new_size[0]}x{new_size[1]}")

    ok, buffer = cv2.imencode('.jpg', img, [int(cv2.IMWRITE_JPEG_QUALITY), int(jpeg_quality)])
    if not ok:
        raise ValueError(f"Could not encode image: {path}")

    return DATA_URI_PREFIX + base64.b64encode(buffer.tobytes()).decode('ascii')


def is_data_uri(image_ref: str) -> bool:
    return isinstance(image_ref, str) and image_ref.startswith("data:") and ";base64," in image_ref
