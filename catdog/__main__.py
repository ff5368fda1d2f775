"""
Classify image files from the command line.

Usage:
    python -m catdog photo1.jpg photo2.png --model models/cat_dog_lite_traced.ptl
"""

import argparse
import logging
from pathlib import Path

from catdog.config import get_settings
from catdog.errors import PreprocessError
from catdog.interpret import NO_IMAGE_MESSAGE
from catdog.loader import load_model
from catdog.pipeline import classify, load_image


def main(argv=None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Classify images as cat, dog or neither")
    parser.add_argument("images", nargs="*", type=Path)
    parser.add_argument("--model", type=Path, default=settings.model_asset)
    parser.add_argument("--cache-dir", type=Path, default=settings.cache_dir)
    args = parser.parse_args(argv)
    if not args.images:
        print(NO_IMAGE_MESSAGE)
        return 0

    logging.basicConfig(level=settings.log_level)
    handle = load_model(args.model, cache_dir=args.cache_dir)

    failed = 0
    for path in args.images:
        try:
            result = classify(handle, load_image(path))
        except PreprocessError as e:
            failed += 1
            print(f"{path}: ERROR: {e}")
            continue
        print(f"{path}: {result.message}")
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
