"""Configuration dataclasses for the Pac-Man agent."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class ScreenConfig:
    """Game geometry and window border configuration.

    The game dimensions are those of the arcade board: a grid of
    28 x 36 tiles, 8 pixels each. Borders are given in points and scaled by
    ``backing_scale_factor`` to get pixels (2.0 on a retina display).
    """
    game_width: int = 224
    game_height: int = 288

    tile_width: int = 8
    tile_height: int = 8

    # Window chrome (points)
    top_border: float = 22.0
    bottom_border: float = 2.0
    backing_scale_factor: float = 2.0

    @property
    def tile_size(self) -> tuple[int, int]:
        """Tile size as (width, height)."""
        return self.tile_width, self.tile_height

    @property
    def grid_shape(self) -> tuple[int, int]:
        """Tile grid shape as (rows, cols)."""
        return (
            self.game_height // self.tile_height,
            self.game_width // self.tile_width,
        )


@dataclass
class WindowRegion:
    """A window declared by screen region.

    Used by sources that cannot enumerate windows themselves.
    """
    app_name: str
    window_name: str
    left: int
    top: int
    width: int
    height: int


@dataclass
class CaptureConfig:
    """Target window and capture timing configuration."""
    target_window: str = "Pac-Man"
    target_application: str = "MAME"

    # ~11 frames per second
    refresh_interval: float = 1.0 / 11.0

    acquisition_interval: float = 0.25
    acquisition_timeout: float = 10.0

    windows: list[WindowRegion] = field(default_factory=list)


@dataclass
class VisionConfig:
    """Vision model configuration.

    ``ignore_regions`` lists (row, col, height, width) blocks of tiles that
    are never classified, e.g. the score rows above the maze.
    """
    model_path: Optional[Path] = None
    confidence_threshold: float = 0.5
    device: str = "cpu"
    ignore_regions: list[tuple[int, int, int, int]] = field(default_factory=list)


@dataclass
class Config:
    """Complete configuration for the agent.

    Combines all sub-configurations for easy management.
    """
    screen: ScreenConfig = field(default_factory=ScreenConfig)
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    vision: VisionConfig = field(default_factory=VisionConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Create config from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Config instance

        Raises:
            ValueError: If a section contains unknown keys or bad values
        """
        try:
            capture_data = dict(data.get("capture", {}))
            capture_data["windows"] = [
                WindowRegion(**region) for region in capture_data.get("windows", [])
            ]

            vision_data = dict(data.get("vision", {}))
            if vision_data.get("model_path") is not None:
                vision_data["model_path"] = Path(vision_data["model_path"])
            vision_data["ignore_regions"] = [
                _ignore_region(region) for region in vision_data.get("ignore_regions", [])
            ]

            return cls(
                screen=ScreenConfig(**data.get("screen", {})),
                capture=CaptureConfig(**capture_data),
                vision=VisionConfig(**vision_data),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_json(cls, config_path: Path | str) -> "Config":
        """Load config from a JSON file.

        Args:
            config_path: Path to the JSON config file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file: {e}") from e
        return cls.from_dict(data)

    def to_json(self, config_path: Path | str, indent: int = 2) -> None:
        """Save config to a JSON file.

        Args:
            config_path: Path to save the JSON config file
            indent: JSON indentation (default: 2)
        """
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            json.dump(self.to_dict(), f, indent=indent)

    def to_dict(self) -> dict:
        """Convert config to dictionary.

        Returns:
            Configuration dictionary
        """
        from dataclasses import asdict

        def convert(obj):
            """Recursively convert Paths to strings and tuples to lists."""
            if isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            if isinstance(obj, (list, tuple)):
                return [convert(v) for v in obj]
            if isinstance(obj, Path):
                return str(obj)
            return obj

        return convert(asdict(self))


def _ignore_region(region) -> tuple[int, int, int, int]:
    values = tuple(int(v) for v in region)
    if len(values) != 4:
        raise ValueError(
            f"ignore region {region!r} is not (row, col, height, width)"
        )
    return values
