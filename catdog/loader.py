"""
Model loading.

The bundled artifact is first copied into a writable cache directory, since the
TorchScript runtimes open models by filesystem path, then loaded onto the CPU.
Both full TorchScript archives (.pt) and mobile lite-interpreter archives (.ptl)
are supported.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import torch
from torch.jit.mobile import _load_for_lite_interpreter

from catdog.config import get_settings
from catdog.errors import LoadError

logger = logging.getLogger(__name__)

LITE_SUFFIX = ".ptl"

PathLike = Union[str, Path]


@dataclass(frozen=True)
class ModelHandle:
    """A loaded model. Created once, never mutated, safe to share between requests."""

    module: Any
    artifact: Path  # the bundled file it was loaded from
    path: Path      # the cached copy the runtime actually opened

    @property
    def name(self) -> str:
        return self.artifact.name

    @property
    def is_lite(self) -> bool:
        return self.path.suffix == LITE_SUFFIX


def cache_artifact(artifact_path: PathLike, cache_dir: PathLike) -> Path:
    """Copy a bundled artifact into cache_dir, overwriting any earlier copy."""
    src = Path(artifact_path)
    if not src.is_file():
        raise LoadError(f"Model artifact not found: {src}")

    dst = Path(cache_dir) / src.name
    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dst)
    except OSError as exc:
        raise LoadError(f"Cannot copy model artifact {src} to {dst}: {exc}") from exc
    return dst


def _deserialize(path: Path):
    if path.suffix == LITE_SUFFIX:
        return _load_for_lite_interpreter(str(path), map_location="cpu")
    module = torch.jit.load(str(path), map_location="cpu")
    module.eval()
    return module


def load_model(artifact_path: PathLike, cache_dir: Optional[PathLike] = None) -> ModelHandle:
    """
    Load a bundled model artifact and return a handle for the inference runner.

    Args:
        artifact_path: the bundled .pt / .ptl file.
        cache_dir: writable directory for the local copy. Defaults to
            CATDOG_CACHE_DIR (see catdog.config).

    Raises:
        LoadError: the artifact is missing, cannot be copied, or fails to deserialize.
    """
    artifact = Path(artifact_path)
    if cache_dir is None:
        cache_dir = get_settings().cache_dir

    logger.debug("Loading model from artifact %s", artifact)
    path = cache_artifact(artifact, cache_dir)
    logger.debug("Model path: %s", path)

    try:
        module = _deserialize(path)
    except (RuntimeError, ValueError, OSError) as exc:
        raise LoadError(f"Cannot deserialize model {artifact}: {exc}") from exc

    logger.info("Model %s loaded from %s", artifact.name, path)
    return ModelHandle(module=module, artifact=artifact, path=path)
