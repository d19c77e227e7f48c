"""
Configuration management for the extraction engine using Pydantic.

Every numeric heuristic of the engine lives here so it can be tuned against
representative pages without touching code. The site-rule table is not part of
the configuration; it is compiled into :mod:`clearpage.extractor.site_rules`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)

DEFAULT_BOILERPLATE_PHRASES: List[str] = [
    "subscribe",
    "share this post",
    "copyright",
    "all rights reserved",
    "privacy policy",
    "terms of service",
    "skip to content",
    "min read",
    "discussion about this post",
    "sign up for",
    "leave a comment",
]

DEFAULT_NAVIGATION_LABELS: List[str] = ["navigation", "menu", "search"]


# --- Nested Configuration Models ---


class ScoringConfig(BaseModel):
    """Weights of the article-likelihood score."""

    word_weight: float = Field(default=1.0, description="Points per visible word.")
    paragraph_weight: float = Field(default=30.0, description="Points per <p> in the subtree.")
    header_weight: float = Field(default=20.0, description="Points per h1-h6 in the subtree.")
    link_penalty: float = Field(default=5.0, description="Points subtracted per <a> in the subtree.")
    tag_bonus: Dict[str, float] = Field(
        default_factory=lambda: {"article": 100.0, "main": 80.0, "div": 0.0},
        description="Bonus keyed by the container's own tag name.",
    )
    other_tag_bonus: float = Field(default=-20.0, description="Bonus for tags absent from tag_bonus.")
    min_words: int = Field(default=10, ge=0, description="Subtrees with at most this many words score 0.")


class ValidationConfig(BaseModel):
    """Gates a candidate must pass to count as confident main content."""

    min_text_length: int = Field(default=140, ge=0, description="Minimum visible text length in characters.")
    min_text_density: float = Field(default=0.2, ge=0.0, le=1.0, description="Minimum text / inner markup length.")
    max_link_ratio: float = Field(default=0.5, ge=0.0, le=1.0, description="Maximum anchor text / total text.")
    dynamic_min_text_length: int = Field(
        default=1000, ge=0, description="Text length that makes any element a dynamic-content candidate."
    )


class LimitsConfig(BaseModel):
    """Hard caps protecting the tree walks from pathological documents."""

    max_input_chars: int = Field(default=5_000_000, gt=0)
    max_nodes: int = Field(default=5_000, gt=0)
    max_depth: int = Field(default=500, gt=0)


class NormalizerConfig(BaseModel):
    """Block clean-up settings."""

    boilerplate_phrases: List[str] = Field(default_factory=lambda: list(DEFAULT_BOILERPLATE_PHRASES))
    navigation_labels: List[str] = Field(default_factory=lambda: list(DEFAULT_NAVIGATION_LABELS))
    words_per_minute: int = Field(default=250, gt=0, description="Reading speed used for the seconds estimate.")
    excerpt_words: int = Field(default=30, gt=0)

    @field_validator("boilerplate_phrases", "navigation_labels")
    @classmethod
    def lowercase_phrases(cls, v: List[str]) -> List[str]:
        return [phrase.strip().lower() for phrase in v if phrase.strip()]


class MonitoringConfig(BaseModel):
    """Configuration for logging."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: Optional[str] = Field(default=None, description="Path to log file. If None, logs to console.")

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class EngineConfig(BaseSettings):
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    normalizer: NormalizerConfig = Field(default_factory=NormalizerConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    extraction_timeout: float = Field(
        default=30.0, gt=0, description="Seconds the async adapter waits for one extraction."
    )

    model_config = SettingsConfigDict(env_prefix="CLEARPAGE_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> EngineConfig:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Load settings from a YAML file, or defaults plus environment when no path is given."""
    if path is None:
        return EngineConfig()
    return EngineConfig.from_yaml(Path(path))
