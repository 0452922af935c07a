"""Shared pytest fixtures for the pacman-agent test suite.

Vision models in these tests are untrained classifiers whose final layer
is rigged so the prediction is known in advance.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import numpy as np
import pytest
import torch

from pacman_agent.config import ScreenConfig, VisionConfig
from pacman_agent.game.tile_types import TileType
from pacman_agent.learn.tile_matcher import TileClassifier, TileMatcher


def make_constant_classifier(tile_type: TileType | None, logit: float = 20.0) -> TileClassifier:
    """Build a classifier that always predicts ``tile_type``.

    With ``None`` every class gets the same logit, so no prediction is
    confident.
    """
    model = TileClassifier()
    head = model.classifier[-1]
    with torch.no_grad():
        head.weight.zero_()
        head.bias.zero_()
        if tile_type is not None:
            head.bias[int(tile_type)] = logit
    return model


def save_checkpoint(model: TileClassifier, path: Path, **extra) -> Path:
    """Save a model in the checkpoint format the matcher reads."""
    checkpoint = {
        "model_state_dict": model.state_dict(),
        "num_classes": model.num_classes,
        "tile_size": [8, 8],
    }
    checkpoint.update(extra)
    torch.save(checkpoint, path)
    return path


@pytest.fixture
def screen() -> ScreenConfig:
    return ScreenConfig()


@pytest.fixture
def make_checkpoint(tmp_path) -> Callable[..., Path]:
    """Factory writing a constant-prediction checkpoint to tmp_path."""

    def _make(tile_type: TileType | None = TileType.WALL, name: str = "tiles.pt") -> Path:
        return save_checkpoint(make_constant_classifier(tile_type), tmp_path / name)

    return _make


@pytest.fixture
def make_matcher(make_checkpoint, screen) -> Callable[..., TileMatcher]:
    """Factory returning a TileMatcher with a constant model loaded."""

    def _make(tile_type: TileType | None = TileType.WALL, **vision_kwargs) -> TileMatcher:
        config = VisionConfig(model_path=make_checkpoint(tile_type), **vision_kwargs)
        matcher = TileMatcher(config, screen)
        assert matcher.load_vision_model()
        return matcher

    return _make


@pytest.fixture
def game_frame(screen) -> np.ndarray:
    """A random frame at game resolution."""
    rng = np.random.default_rng(0)
    return rng.integers(
        0, 256, size=(screen.game_height, screen.game_width, 3), dtype=np.uint8
    )
