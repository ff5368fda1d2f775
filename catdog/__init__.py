"""
On-device style cat / dog recognizer.

Typical use:

    handle = load_model("models/cat_dog_lite_traced.ptl")
    result = classify(handle, load_image("photo.jpg"))
    print(result.message)
"""

from catdog.errors import CatDogError, LoadError, ModelContractError, PreprocessError
from catdog.inference import ScorePair, run_inference
from catdog.interpret import ClassificationResult, interpret
from catdog.loader import ModelHandle, cache_artifact, load_model
from catdog.pipeline import classify, load_image
from catdog.preprocessing import preprocess

__all__ = [
    "CatDogError",
    "LoadError",
    "ModelContractError",
    "PreprocessError",
    "ModelHandle",
    "ScorePair",
    "ClassificationResult",
    "cache_artifact",
    "load_model",
    "load_image",
    "preprocess",
    "run_inference",
    "interpret",
    "classify",
]
