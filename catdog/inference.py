"""
Inference runner: one forward pass, two raw scores out.
"""

import logging
import math
from typing import NamedTuple

import torch

from catdog.errors import ModelContractError
from catdog.loader import ModelHandle

logger = logging.getLogger(__name__)

NUM_CLASSES = 2


class ScorePair(NamedTuple):
    """Raw logits in the model's fixed output order."""

    cat: float
    dog: float


@torch.no_grad()
def run_inference(handle: ModelHandle, tensor: torch.Tensor) -> ScorePair:
    """
    Feed a preprocessed (3, 224, 224) tensor through the model.

    Raises:
        ModelContractError: the model output is not exactly two finite values.
    """
    batch = tensor.unsqueeze(0) if tensor.dim() == 3 else tensor
    output = handle.module(batch)
    if isinstance(output, (tuple, list)):
        output = output[0]

    scores = output.detach().reshape(-1).float().tolist()
    logger.debug("Raw result: %s", scores)

    if len(scores) != NUM_CLASSES:
        logger.error("Model %s returned %d scores, expected %d",
                     handle.name, len(scores), NUM_CLASSES)
        raise ModelContractError(
            f"Model {handle.name} must output {NUM_CLASSES} scores, got {len(scores)}"
        )
    if not all(math.isfinite(s) for s in scores):
        logger.error("Model %s returned non-finite scores: %s", handle.name, scores)
        raise ModelContractError(f"Model {handle.name} returned non-finite scores: {scores}")

    return ScorePair(cat=scores[0], dog=scores[1])
