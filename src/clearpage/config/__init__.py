"""Configuration models for the extraction engine."""

from .config import (
    EngineConfig,
    LimitsConfig,
    MonitoringConfig,
    NormalizerConfig,
    ScoringConfig,
    ValidationConfig,
    load_config,
)

__all__ = [
    "EngineConfig",
    "LimitsConfig",
    "MonitoringConfig",
    "NormalizerConfig",
    "ScoringConfig",
    "ValidationConfig",
    "load_config",
]
