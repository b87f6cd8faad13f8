"""Loading of scoring weights and category tables from config files.

Expected format (YAML or JSON, every key optional):

    PublicSite: 3
    EEEUPermissions: 3
    EveryonePermissions: 3
    AnyoneLinks: 2
    NoSensitivityLabel: 2
    HighUserCount: 2
    UserCountThreshold: 500
    Categories:
      - {name: No Risk, min: 0, max: 0, color: "#27ae60"}
      - {name: Elevated, min: 1, color: "#c0392b"}
"""

import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from siterisk.exceptions import ConfigurationError
from siterisk.scoring.categories import DEFAULT_CATEGORIES, RiskCategoryTable
from siterisk.scoring.factors import ScoringConfig

logger = logging.getLogger(__name__)


class CategorySettings(BaseModel):
    """One category entry in a config file."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    min_score: StrictInt = Field(alias="min")
    max_score: Optional[StrictInt] = Field(None, alias="max")
    color: Optional[str] = None


class ScoringSettings(BaseModel):
    """Schema of a scoring config file."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    public_site: Optional[StrictInt] = Field(None, alias="PublicSite")
    eeeu_permissions: Optional[StrictInt] = Field(None, alias="EEEUPermissions")
    everyone_permissions: Optional[StrictInt] = Field(None, alias="EveryonePermissions")
    anyone_links: Optional[StrictInt] = Field(None, alias="AnyoneLinks")
    no_sensitivity_label: Optional[StrictInt] = Field(None, alias="NoSensitivityLabel")
    high_user_count: Optional[StrictInt] = Field(None, alias="HighUserCount")
    user_count_threshold: Optional[StrictInt] = Field(None, alias="UserCountThreshold")
    categories: Optional[list[CategorySettings]] = Field(None, alias="Categories")

    def scoring_config(self, base: Optional[ScoringConfig] = None) -> ScoringConfig:
        weights = self.model_dump(exclude={"categories"}, exclude_none=True)
        return (base or ScoringConfig()).with_overrides(**weights)

    def category_table(self) -> RiskCategoryTable:
        if not self.categories:
            return DEFAULT_CATEGORIES
        return RiskCategoryTable.from_definitions(
            {"name": c.name, "min": c.min_score, "max": c.max_score, "color": c.color}
            for c in self.categories
        )


def load_config(path: Optional[Union[str, Path]] = None) -> tuple[ScoringConfig, RiskCategoryTable]:
    """
    Load scoring weights and categories.

    Args:
        path: YAML/JSON config file; None returns the defaults

    Returns:
        (ScoringConfig, RiskCategoryTable)

    Raises:
        ConfigurationError: if the file is missing, unreadable or invalid
    """
    if path is None:
        return ScoringConfig(), DEFAULT_CATEGORIES

    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid config file: expected a mapping at top level in {path}")

    try:
        settings = ScoringSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config file {path}:\n{e}") from e

    logger.info(f"Loaded scoring config from {path}")
    return settings.scoring_config(), settings.category_table()
