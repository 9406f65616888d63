"""Pytest fixtures for imgconv tests."""

import os
from pathlib import Path
from typing import Callable, Optional

import pytest
from PIL import Image

# Keep a developer's .env or shell exports from leaking into the tests
for key in list(os.environ):
    if key.startswith("IMGCONV_"):
        del os.environ[key]

from imgconv.config import Settings  # noqa: E402


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a small, fixed worker count."""
    return Settings(max_concurrent_conversions=4, _env_file=None)


@pytest.fixture
def make_image() -> Callable[..., Path]:
    """Write a solid-color test image and return its path."""

    def _make(
        path: Path,
        size=(200, 100),
        image_format: str = "JPEG",
        mode: str = "RGB",
        color=(200, 30, 30),
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        if mode == "RGBA" and len(color) == 3:
            color = (*color, 128)
        Image.new(mode, size, color).save(path, format=image_format)
        return path

    return _make


@pytest.fixture
def image_dir(tmp_path: Path, make_image) -> Path:
    """Directory with two JPEGs and one PNG."""
    directory = tmp_path / "photos"
    make_image(directory / "A.jpg")
    make_image(directory / "B.jpg", size=(100, 200))
    make_image(directory / "C.png", image_format="PNG")
    return directory


class ScriptedPort:
    """ConsolePort double feeding canned answers and recording output."""

    def __init__(self, answers: Optional[list] = None):
        self.answers = list(answers or [])
        self.lines: list = []

    def read_line(self) -> Optional[str]:
        if not self.answers:
            return None
        return self.answers.pop(0)

    def write_line(self, text: str = "") -> None:
        self.lines.append(text)

    @property
    def output(self) -> str:
        return "\n".join(self.lines)


@pytest.fixture
def scripted_port() -> Callable[..., ScriptedPort]:
    return ScriptedPort
