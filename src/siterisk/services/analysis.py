"""Aggregation of classified sites into a ranking and summary statistics."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from siterisk.scoring.categories import DEFAULT_CATEGORIES, RiskCategoryTable
from siterisk.scoring.factors import ClassifiedSite

# Score at or above which a site counts as high risk in the summary
HIGH_RISK_THRESHOLD = 7


@dataclass(frozen=True)
class Statistics:
    """Summary figures for one analysis run."""

    total_sites: int = 0
    high_risk_sites: int = 0
    public_sites: int = 0
    sites_with_anyone_links: int = 0
    average_score: float = 0.0
    max_score: int = 0
    category_counts: Mapping[str, int] = field(default_factory=dict, hash=False)
    sites_with_warnings: int = 0

    def __post_init__(self):
        object.__setattr__(self, "category_counts", MappingProxyType(dict(self.category_counts)))

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_sites": self.total_sites,
            "high_risk_sites": self.high_risk_sites,
            "public_sites": self.public_sites,
            "sites_with_anyone_links": self.sites_with_anyone_links,
            "average_score": self.average_score,
            "max_score": self.max_score,
            "category_counts": dict(self.category_counts),
            "sites_with_warnings": self.sites_with_warnings,
        }


class AnalysisAggregator:
    """Ranks classified sites and computes run statistics."""

    def __init__(
        self,
        table: Optional[RiskCategoryTable] = None,
        high_risk_threshold: int = HIGH_RISK_THRESHOLD,
    ):
        self.table = table if table is not None else DEFAULT_CATEGORIES
        self.high_risk_threshold = high_risk_threshold

    def rank(self, sites: Sequence[ClassifiedSite]) -> list[ClassifiedSite]:
        """Sort by score descending; equal scores keep input order."""
        return sorted(sites, key=lambda s: -s.score)

    def statistics(self, sites: Sequence[ClassifiedSite]) -> Statistics:
        """Compute summary statistics in a single pass."""
        counts = {name: 0 for name in self.table.names}
        total = 0
        score_sum = 0
        max_score = 0
        high_risk = 0
        public = 0
        with_links = 0
        with_warnings = 0

        for s in sites:
            total += 1
            score_sum += s.score
            max_score = max(max_score, s.score)
            if s.score >= self.high_risk_threshold:
                high_risk += 1
            if s.site.is_public:
                public += 1
            if s.site.anyone_link_count > 0:
                with_links += 1
            if s.warnings:
                with_warnings += 1
            counts[s.category.name] = counts.get(s.category.name, 0) + 1

        return Statistics(
            total_sites=total,
            high_risk_sites=high_risk,
            public_sites=public,
            sites_with_anyone_links=with_links,
            average_score=round(score_sum / total, 1) if total else 0.0,
            max_score=max_score,
            category_counts=MappingProxyType(counts),
            sites_with_warnings=with_warnings,
        )

    def aggregate(self, sites: Sequence[ClassifiedSite]) -> tuple[list[ClassifiedSite], Statistics]:
        """
        Rank sites and summarise them.

        Args:
            sites: Every classified site from the run, in input order

        Returns:
            (sorted sites, statistics); empty input gives ([], zeroed stats)
        """
        return self.rank(sites), self.statistics(sites)
