"""
Image preprocessing: arbitrary-size RGB image -> normalized (3, 224, 224) float tensor.
"""

import logging

import numpy as np
import torch
from PIL import Image
from torchvision import transforms

from catdog.errors import PreprocessError

logger = logging.getLogger(__name__)

INPUT_SIZE = 224

# torchvision ImageNet statistics, the values the model was trained with
NORM_MEAN_RGB = (0.485, 0.456, 0.406)
NORM_STD_RGB = (0.229, 0.224, 0.225)

# Direct stretch to 224x224, no crop or padding
INFER_TRANSFORMS = transforms.Compose([
    transforms.Resize((INPUT_SIZE, INPUT_SIZE),
                      interpolation=transforms.InterpolationMode.BILINEAR),
    transforms.ToTensor(),
    transforms.Normalize(mean=NORM_MEAN_RGB, std=NORM_STD_RGB),
])


def to_rgb_image(image) -> Image.Image:
    """Coerce a PIL image or an HxWx3 uint8 array into a non-empty RGB PIL image."""
    if image is None:
        raise PreprocessError("No image given")

    if isinstance(image, np.ndarray):
        if image.ndim != 3 or image.shape[2] != 3:
            raise PreprocessError(f"Expected an HxWx3 array, got shape {image.shape}")
        if image.size == 0:
            raise PreprocessError(f"Image is empty: shape {image.shape}")
        image = Image.fromarray(image.astype(np.uint8, copy=False))
    elif not isinstance(image, Image.Image):
        raise PreprocessError(f"Unsupported image type: {type(image).__name__}")

    width, height = image.size
    if width == 0 or height == 0:
        raise PreprocessError(f"Image is empty: {width}x{height}")

    try:
        return image.convert("RGB")
    except (OSError, ValueError) as exc:
        raise PreprocessError(f"Cannot convert image to RGB: {exc}") from exc


def preprocess(image) -> torch.Tensor:
    """
    Resize, normalize, and lay out an image for the model.

    Returns a contiguous float32 tensor of shape (3, 224, 224), channel-major:
    all red values, then all green, then all blue.
    """
    rgb = to_rgb_image(image)
    logger.debug("Normalization mean=%s std=%s", NORM_MEAN_RGB, NORM_STD_RGB)
    return INFER_TRANSFORMS(rgb).contiguous()
