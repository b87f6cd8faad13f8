"""Site risk scoring engine."""

from siterisk.scoring.categories import (
    DEFAULT_CATEGORIES,
    RiskCategory,
    RiskCategoryTable,
    RiskClassifier,
)
from siterisk.scoring.engine import SiteRiskScorer
from siterisk.scoring.factors import ClassifiedSite, ScoredSite, ScoringConfig, SiteRecord

__all__ = [
    "DEFAULT_CATEGORIES",
    "RiskCategory",
    "RiskCategoryTable",
    "RiskClassifier",
    "SiteRiskScorer",
    "ClassifiedSite",
    "ScoredSite",
    "ScoringConfig",
    "SiteRecord",
]
