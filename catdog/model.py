"""
Network definition for the cat / dog recognizer and its export to a
mobile lite-interpreter artifact (the bundled .ptl file).

Uses ResNet-18 as a backbone with a two-logit head: index 0 = cat, index 1 = dog.

Usage:
    python -m catdog.model --checkpoint models/cat_dog_model.pt --out models/cat_dog_lite_traced.ptl
"""

import logging
from pathlib import Path
from typing import Optional

import torch
import torch.nn as nn
from torch.utils.mobile_optimizer import optimize_for_mobile
from torchvision import models

from catdog.preprocessing import INPUT_SIZE

logger = logging.getLogger(__name__)


class CatDogModel(nn.Module):
    """ResNet-18 with a two-class cat/dog head."""

    def __init__(self, pretrained: bool = False):
        super().__init__()
        weights = models.ResNet18_Weights.DEFAULT if pretrained else None
        self.backbone = models.resnet18(weights=weights)

        in_features = self.backbone.fc.in_features
        self.backbone.fc = nn.Sequential(
            nn.Dropout(p=0.3),
            nn.Linear(in_features, 2),  # Raw logits, softmax applied by the interpreter
        )

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return self.backbone(x)


def build_model(checkpoint_path: Optional[str] = None) -> CatDogModel:
    """Create the network, optionally restoring weights from a checkpoint file."""
    model = CatDogModel(pretrained=False)
    if checkpoint_path:
        state = torch.load(checkpoint_path, map_location="cpu")
        # Support both raw state_dict and checkpoint dict
        if isinstance(state, dict) and "model_state_dict" in state:
            model.load_state_dict(state["model_state_dict"])
        else:
            model.load_state_dict(state)
    model.eval()
    return model


def export_for_mobile(model: nn.Module, out_path: Path, optimize: bool = True) -> Path:
    """Trace the model on a dummy input and save it for the lite interpreter."""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    model.eval()
    example = torch.zeros(1, 3, INPUT_SIZE, INPUT_SIZE)
    with torch.no_grad():
        traced = torch.jit.trace(model, example)
    if optimize:
        traced = optimize_for_mobile(traced)
    traced._save_for_lite_interpreter(str(out_path))

    logger.info("Exported %s (optimized=%s)", out_path, optimize)
    return out_path


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Export the cat/dog model for mobile inference")
    parser.add_argument("--checkpoint", type=str, default=None,
                        help="State dict or checkpoint dict; random weights if omitted")
    parser.add_argument("--out", type=Path, default=Path("models/cat_dog_lite_traced.ptl"))
    parser.add_argument("--no-optimize", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    model = build_model(args.checkpoint)
    total_params = sum(p.numel() for p in model.parameters())
    print(f"Total parameters: {total_params:,}")
    path = export_for_mobile(model, args.out, optimize=not args.no_optimize)
    print(f"Model saved to: {path}")
