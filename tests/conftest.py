"""
Shared fixtures: tiny deterministic TorchScript models written to tmp_path,
so no real weights are needed.
"""

import numpy as np
import pytest
import torch
import torch.nn as nn
from PIL import Image

from catdog.loader import load_model


class TinyNet(nn.Module):
    """Global average pool + linear layer: (B, 3, H, W) -> (B, n_out)."""

    def __init__(self, n_out: int = 2):
        super().__init__()
        self.pool = nn.AdaptiveAvgPool2d(1)
        self.fc = nn.Linear(3, n_out)

    def forward(self, x):
        return self.fc(self.pool(x).flatten(1))


class FixedLogits(nn.Module):
    """Ignores the image and always returns the same logits."""

    def __init__(self, logits):
        super().__init__()
        self.register_buffer("logits", torch.tensor([logits], dtype=torch.float32))

    def forward(self, x):
        return self.logits.expand(x.shape[0], -1)


def _trace(module: nn.Module):
    module.eval()
    with torch.no_grad():
        return torch.jit.trace(module, torch.zeros(1, 3, 224, 224), check_trace=False)


def _tiny_net(n_out: int = 2) -> nn.Module:
    torch.manual_seed(0)
    return TinyNet(n_out)


@pytest.fixture
def assets_dir(tmp_path):
    d = tmp_path / "assets"
    d.mkdir()
    return d


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def model_file(assets_dir):
    """A well-formed two-output TorchScript artifact."""
    path = assets_dir / "tiny.pt"
    torch.jit.save(_trace(_tiny_net()), str(path))
    return path


@pytest.fixture
def lite_model_file(assets_dir):
    """The same network saved for the mobile lite interpreter."""
    path = assets_dir / "tiny_lite.ptl"
    _trace(_tiny_net())._save_for_lite_interpreter(str(path))
    return path


@pytest.fixture
def bad_model_file(assets_dir):
    """An artifact that breaks the output contract: three scores instead of two."""
    path = assets_dir / "three_outputs.pt"
    torch.jit.save(_trace(_tiny_net(n_out=3)), str(path))
    return path


@pytest.fixture
def fixed_model_file(assets_dir):
    """Factory: artifact that always outputs the given (cat, dog) logits."""
    def make(logits, name="fixed.pt"):
        path = assets_dir / name
        torch.jit.save(_trace(FixedLogits(logits)), str(path))
        return path
    return make


@pytest.fixture
def handle(model_file, cache_dir):
    return load_model(model_file, cache_dir=cache_dir)


@pytest.fixture
def rgb_image():
    rng = np.random.default_rng(42)
    return Image.fromarray(rng.integers(0, 256, (150, 100, 3), dtype=np.uint8))
