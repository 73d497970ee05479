"""
Configuration management for Study Digits.

Loads configuration from environment variables (typically from a .env file).
Uses python-dotenv to load .env automatically.

Usage:
    from study_digits.config import config

    # Dataset locations
    training_path = config.data.training_set

    # Quality metric sample sizes
    samples = config.quality.c_index_samples
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Look for .env in project root (parent of src/)
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


# Reduced-time mode keeps only the head of each dataset.
REDUCED_TIME_TRAINING_LIMIT = 100
REDUCED_TIME_SAMPLE_LIMIT = 10


@dataclass
class DataConfig:
    """Dataset and output locations."""
    training_set: str
    test_set: str
    condensed_output: str

    def __post_init__(self):
        """Provide defaults if not set."""
        if not self.training_set:
            self.training_set = "training_set.csv"
        if not self.test_set:
            self.test_set = "test_set.csv"
        if not self.condensed_output:
            self.condensed_output = "condensed_training_set.csv"


@dataclass
class QualityDefaults:
    """Default point sample sizes for the cluster quality indices."""
    c_index_samples: int = 1000
    goodman_kruskal_samples: int = 50

    def __post_init__(self):
        """Validate that sample sizes are usable."""
        if self.c_index_samples < 2:
            raise ValueError(
                f"C-index needs at least 2 sampled points, got {self.c_index_samples}"
            )
        if self.goodman_kruskal_samples < 4:
            raise ValueError(
                "Goodman-Kruskal index needs at least 4 sampled points, "
                f"got {self.goodman_kruskal_samples}"
            )


def _int_from_env(name: str, default: Optional[int]) -> Optional[int]:
    """Read an integer environment variable, naming it in the error if invalid."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


class Config:
    """
    Application configuration loaded from environment variables.

    Environment variables can be set:
    1. In a .env file in the project root
    2. In the system environment
    """

    def __init__(self):
        """Load configuration from environment."""
        self.data = DataConfig(
            training_set=os.getenv("STUDY_DIGITS_TRAINING_SET", "training_set.csv"),
            test_set=os.getenv("STUDY_DIGITS_TEST_SET", "test_set.csv"),
            condensed_output=os.getenv(
                "STUDY_DIGITS_CONDENSED_OUTPUT", "condensed_training_set.csv"
            ),
        )
        self.quality = QualityDefaults(
            c_index_samples=_int_from_env("STUDY_DIGITS_C_INDEX_SAMPLES", 1000),
            goodman_kruskal_samples=_int_from_env("STUDY_DIGITS_GK_SAMPLES", 50),
        )
        self.seed = _int_from_env("STUDY_DIGITS_SEED", None)
        self.log_level = os.getenv("STUDY_DIGITS_LOG_LEVEL", "INFO")


# Global config instance
config = Config()
