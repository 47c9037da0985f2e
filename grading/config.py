"""Engine configuration loaded from ``config.yaml``."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .banding import DEFAULT_FALLBACK_LETTER, DEFAULT_GRADE_BANDS, GradeBand, GradeBander
from .schemas import AssessmentCategory
from .weights import DEFAULT_WEIGHT_TABLE, WEIGHT_TOLERANCE, WeightProfile, validate_weights

DEFAULT_CONFIG_PATH = Path("config.yaml")


class ConfigError(Exception):
    pass


class LoggingConfig(BaseModel):
    level: str = "INFO"
    log_filename: str = "grading.log"


class EngineConfig(BaseModel):
    output_dir: str = "output"
    weight_tolerance: float = WEIGHT_TOLERANCE
    default_weights: Dict[AssessmentCategory, float] = Field(
        default_factory=lambda: dict(DEFAULT_WEIGHT_TABLE)
    )
    grade_bands: List[GradeBand] = Field(default_factory=lambda: list(DEFAULT_GRADE_BANDS))
    fallback_letter: str = DEFAULT_FALLBACK_LETTER
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "extra": "ignore",
    }

    @field_validator("grade_bands")
    @classmethod
    def _grade_bands_valid(cls, v: List[GradeBand]) -> List[GradeBand]:
        return list(GradeBander(v).bands)

    @model_validator(mode="after")
    def _default_weights_valid(self) -> "EngineConfig":
        # The seed table must itself be a committable profile under this tolerance.
        self.default_weights = validate_weights(self.default_weights, tolerance=self.weight_tolerance)
        return self

    def build_bander(self) -> GradeBander:
        return GradeBander(self.grade_bands, fallback=self.fallback_letter)

    def default_profile(self, class_subject_id: Optional[str] = None) -> WeightProfile:
        return self.profile_from_weights(self.default_weights, class_subject_id)

    def profile_from_weights(
        self,
        weights: Dict[AssessmentCategory, float],
        class_subject_id: Optional[str] = None,
    ) -> WeightProfile:
        """Build a draft from ``weights`` and commit it under this config's tolerance."""
        draft = WeightProfile(class_subject_id=class_subject_id, weights=weights)
        return draft.commit(tolerance=self.weight_tolerance)


def load_engine_config(config_path: Optional[Path] = None) -> EngineConfig:
    """Read ``config_path`` (YAML) into an :class:`EngineConfig`.

    ``None`` returns the built-in defaults. A path that does not exist raises
    ``FileNotFoundError``; malformed content raises :class:`ConfigError`.
    """
    if config_path is None:
        return EngineConfig()
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    try:
        data = yaml.safe_load(config_path.read_text()) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {config_path}")
    try:
        return EngineConfig.model_validate(data)
    except (ValidationError, ValueError) as exc:
        raise ConfigError(f"Invalid engine config in {config_path}: {exc}") from exc
