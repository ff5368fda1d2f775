"""
Exception types raised by the recognizer.
"""


class CatDogError(Exception):
    """Base class for all recognizer errors."""


class LoadError(CatDogError):
    """The model artifact is missing, unreadable, or cannot be deserialized."""


class PreprocessError(CatDogError):
    """The input image is empty, undecodable, or of an unsupported type."""


class ModelContractError(CatDogError, RuntimeError):
    """The bundled model produced output that breaks its contract (not 2 finite logits)."""
