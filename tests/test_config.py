"""
Tests for environment-driven configuration.
"""

import pytest

from study_digits.config import Config, DataConfig, QualityDefaults

ENV_VARS = [
    "STUDY_DIGITS_TRAINING_SET",
    "STUDY_DIGITS_TEST_SET",
    "STUDY_DIGITS_CONDENSED_OUTPUT",
    "STUDY_DIGITS_SEED",
    "STUDY_DIGITS_LOG_LEVEL",
    "STUDY_DIGITS_C_INDEX_SAMPLES",
    "STUDY_DIGITS_GK_SAMPLES",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every STUDY_DIGITS_* variable for the test."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    cfg = Config()

    assert cfg.data.training_set == "training_set.csv"
    assert cfg.data.test_set == "test_set.csv"
    assert cfg.data.condensed_output == "condensed_training_set.csv"
    assert cfg.quality.c_index_samples == 1000
    assert cfg.quality.goodman_kruskal_samples == 50
    assert cfg.seed is None
    assert cfg.log_level == "INFO"


def test_environment_overrides(clean_env):
    clean_env.setenv("STUDY_DIGITS_TRAINING_SET", "/data/train.csv")
    clean_env.setenv("STUDY_DIGITS_SEED", "17")
    clean_env.setenv("STUDY_DIGITS_GK_SAMPLES", "12")
    clean_env.setenv("STUDY_DIGITS_LOG_LEVEL", "DEBUG")

    cfg = Config()

    assert cfg.data.training_set == "/data/train.csv"
    assert cfg.seed == 17
    assert cfg.quality.goodman_kruskal_samples == 12
    assert cfg.log_level == "DEBUG"


def test_blank_values_use_defaults(clean_env):
    clean_env.setenv("STUDY_DIGITS_TEST_SET", "")
    clean_env.setenv("STUDY_DIGITS_SEED", "  ")

    cfg = Config()

    assert cfg.data.test_set == "test_set.csv"
    assert cfg.seed is None


def test_invalid_integer_names_the_variable(clean_env):
    clean_env.setenv("STUDY_DIGITS_C_INDEX_SAMPLES", "many")

    with pytest.raises(ValueError, match="STUDY_DIGITS_C_INDEX_SAMPLES"):
        Config()


def test_quality_sample_minimums():
    with pytest.raises(ValueError, match="C-index"):
        QualityDefaults(c_index_samples=1)
    with pytest.raises(ValueError, match="Goodman-Kruskal"):
        QualityDefaults(goodman_kruskal_samples=3)


def test_data_config_fills_empty_paths():
    data = DataConfig(training_set="", test_set="t.csv", condensed_output="")

    assert data.training_set == "training_set.csv"
    assert data.test_set == "t.csv"
    assert data.condensed_output == "condensed_training_set.csv"
