"""
Tests for catdog.pipeline: picking an image and classifying it end to end.
"""

import io

import numpy as np
import pytest
from PIL import Image

from catdog import classify, load_image, load_model
from catdog.__main__ import main
from catdog.errors import PreprocessError
from catdog.interpret import CAT, DOG, NEITHER


def _png_bytes(size=(64, 48), color=(10, 200, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color=color).save(buf, format="PNG")
    return buf.getvalue()


class TestLoadImage:
    def test_from_path(self, tmp_path):
        path = tmp_path / "pet.png"
        path.write_bytes(_png_bytes())
        img = load_image(path)
        assert img.mode == "RGB"
        assert img.size == (64, 48)

    def test_from_bytes(self):
        assert load_image(_png_bytes()).size == (64, 48)

    def test_from_file_object(self):
        assert load_image(io.BytesIO(_png_bytes())).mode == "RGB"

    def test_rgba_converted(self, tmp_path):
        path = tmp_path / "rgba.png"
        Image.new("RGBA", (20, 20), color=(1, 2, 3, 128)).save(path)
        assert load_image(path).mode == "RGB"

    def test_missing_file(self, tmp_path):
        with pytest.raises(PreprocessError, match="not found"):
            load_image(tmp_path / "missing.jpg")

    def test_undecodable_bytes(self):
        with pytest.raises(PreprocessError):
            load_image(b"definitely not a jpeg")

    def test_unsupported_source(self):
        with pytest.raises(PreprocessError):
            load_image(12345)

    def test_oversized_image_is_recoverable(self, monkeypatch):
        """Pillow's decompression-bomb guard surfaces as PreprocessError."""
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 50_000)
        with pytest.raises(PreprocessError, match="Cannot read image"):
            load_image(_png_bytes(size=(400, 400)))


class TestClassify:
    @pytest.mark.parametrize("logits, label, confidence", [
        ([0.0, 0.0], NEITHER, 50),
        ([0.0, 10.0], DOG, 100),
        ([3.0, -3.0], CAT, 100),
    ])
    def test_end_to_end(self, fixed_model_file, cache_dir, rgb_image, logits, label, confidence):
        """image → tensor → scores → label."""
        handle = load_model(fixed_model_file(logits), cache_dir=cache_dir)
        result = classify(handle, rgb_image)
        assert result.label == label
        assert result.confidence == confidence

    def test_random_weights_give_valid_result(self, handle, rgb_image):
        result = classify(handle, rgb_image)
        assert result.label in (CAT, DOG, NEITHER)
        assert 0 <= result.confidence <= 100

    def test_accepts_numpy_image(self, handle):
        arr = np.random.randint(0, 255, (31, 77, 3), dtype=np.uint8)
        assert classify(handle, arr).label in (CAT, DOG, NEITHER)

    def test_invalid_image(self, handle):
        """Invalid input is recoverable: PreprocessError, not a crash."""
        with pytest.raises(PreprocessError):
            classify(handle, Image.new("RGB", (0, 0)))


class TestCommandLine:
    def test_prints_one_line_per_image(self, fixed_model_file, cache_dir, tmp_path, capsys):
        good = tmp_path / "good.png"
        good.write_bytes(_png_bytes())
        bad = tmp_path / "bad.png"
        bad.write_bytes(b"garbage")
        model = fixed_model_file([0.0, 10.0])

        code = main([str(good), str(bad), "--model", str(model), "--cache-dir", str(cache_dir)])

        out = capsys.readouterr().out.splitlines()
        assert code == 1
        assert out[0] == f"{good}: The image is a dog (100%)"
        assert out[1].startswith(f"{bad}: ERROR:")

    def test_no_images_shows_placeholder(self, capsys):
        """With nothing picked, the placeholder text is shown and no model is needed."""
        assert main([]) == 0
        assert capsys.readouterr().out.strip() == "No image selected"
