"""
Result interpretation: two logits -> label + confidence percentage.
"""

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from catdog.errors import ModelContractError

CAT = "cat"
DOG = "dog"
NEITHER = "neither"

# Inclusive percentage ranges of the dog probability
DOG_MIN_PCT = 66
CAT_MAX_PCT = 33

NO_IMAGE_MESSAGE = "No image selected"


@dataclass(frozen=True)
class ClassificationResult:
    label: str           # "cat", "dog" or "neither"
    confidence: int      # 0 - 100
    dog_percentage: int  # rounded two-class softmax probability of "dog", 0 - 100

    @property
    def message(self) -> str:
        if self.label == DOG:
            return f"The image is a dog ({self.confidence}%)"
        if self.label == CAT:
            return f"The image is a cat ({self.confidence}%)"
        return f"Neither ({self.confidence}%)"


def dog_probability(s0: float, s1: float) -> float:
    """
    exp(s1) / (exp(s0) + exp(s1)), evaluated as written (no max-subtraction).

    IEEE float64 semantics: an overflowing exp is inf, so (1000, 0) gives 0.0.
    Only an undefined ratio (inf / inf or 0 / 0) is an error.
    """
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        e0, e1 = np.exp(np.float64(s0)), np.exp(np.float64(s1))
        p = e1 / (e0 + e1)
    if np.isnan(p):
        raise ModelContractError(f"Dog probability undefined for logits ({s0}, {s1})")
    return float(p)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def interpret(scores: Sequence[float]) -> ClassificationResult:
    """Map a (cat, dog) score pair to a ClassificationResult."""
    s0, s1 = scores
    pct = _round_half_up(dog_probability(s0, s1) * 100)

    if pct >= DOG_MIN_PCT:
        return ClassificationResult(label=DOG, confidence=pct, dog_percentage=pct)
    if pct <= CAT_MAX_PCT:
        return ClassificationResult(label=CAT, confidence=100 - pct, dog_percentage=pct)
    return ClassificationResult(label=NEITHER, confidence=pct, dog_percentage=pct)
