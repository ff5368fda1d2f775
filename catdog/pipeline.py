"""
End-to-end classification: image -> preprocess -> forward pass -> label.

Picking an image (load_image) and classifying it (classify) are separate steps,
so either can be driven on its own.
"""

import io
import logging
from pathlib import Path

from PIL import Image

from catdog.errors import PreprocessError
from catdog.inference import run_inference
from catdog.interpret import ClassificationResult, interpret
from catdog.loader import ModelHandle
from catdog.preprocessing import preprocess

logger = logging.getLogger(__name__)


def load_image(source) -> Image.Image:
    """Decode an image from a path, raw bytes, or a binary file object into RGB."""
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)
    elif isinstance(source, (str, Path)):
        source = Path(source)
        if not source.is_file():
            raise PreprocessError(f"Image file not found: {source}")
    elif not hasattr(source, "read"):
        raise PreprocessError(f"Unsupported image source: {type(source).__name__}")

    try:
        with Image.open(source) as img:
            return img.convert("RGB")
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise PreprocessError(f"Cannot read image: {exc}") from exc


def classify(handle: ModelHandle, image) -> ClassificationResult:
    """
    Classify one image with an already-loaded model.

    Raises:
        PreprocessError: the image is invalid; the caller may offer another one.
        ModelContractError: the model broke its output contract.
    """
    tensor = preprocess(image)
    scores = run_inference(handle, tensor)
    result = interpret(scores)
    logger.debug("scores=%s -> %s (%d%%)", tuple(scores), result.label, result.confidence)
    return result

