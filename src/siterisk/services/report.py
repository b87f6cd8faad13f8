"""Report view model and the JSON/CSV export surface."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

import pandas as pd

from siterisk.scoring.categories import DEFAULT_CATEGORIES, RiskCategoryTable
from siterisk.scoring.factors import ClassifiedSite, ScoringConfig
from siterisk.services.analysis import Statistics

logger = logging.getLogger(__name__)

# Display and export columns, in order
DISPLAY_COLUMNS = [
    "Score",
    "Risk Level",
    "Site Name",
    "URL",
    "Privacy",
    "Users",
    "Anyone Links",
    "EEEU",
    "Everyone",
    "Risk Reasons",
]

UNNAMED_SITE = "Unnamed Site"
PRIVACY_NOT_SET = "Not Set"


def site_record(site: ClassifiedSite) -> dict:
    """Flatten a classified site into one display/export row."""
    return {
        "Score": site.score,
        "Risk Level": site.category.name,
        "Site Name": site.site.name or UNNAMED_SITE,
        "URL": site.site.url,
        "Privacy": site.site.privacy or PRIVACY_NOT_SET,
        "Users": site.site.user_count,
        "Anyone Links": site.site.anyone_link_count,
        "EEEU": site.site.eeeu_count,
        "Everyone": site.site.everyone_count,
        "Risk Reasons": site.reasons_text,
    }


@dataclass(frozen=True)
class ViewModel:
    """Everything the renderer and exporters need for one run."""

    scoring_config: ScoringConfig
    statistics: Statistics
    sites: tuple[ClassifiedSite, ...]
    categories: RiskCategoryTable = DEFAULT_CATEGORIES

    def top(self, n: int = 5) -> list[ClassifiedSite]:
        """Highest-scoring sites, ties in input order."""
        return list(self.sites[: max(0, n)])

    def to_records(self) -> list[dict]:
        return [site_record(s) for s in self.sites]

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.to_records(), columns=DISPLAY_COLUMNS)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "scoring_config": self.scoring_config.to_dict(),
            "statistics": self.statistics.to_dict(),
            "categories": self.categories.to_list(),
            "sites": self.to_records(),
        }

    def write_json(self, path: Union[str, Path]) -> Path:
        """Write the ranked rows as a record-oriented JSON array."""
        path = Path(path)
        path.write_text(json.dumps(self.to_records(), indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info(f"Wrote {len(self.sites)} records to {path}")
        return path

    def write_csv(self, path: Union[str, Path]) -> Path:
        """Write the ranked rows as CSV with the display column headers."""
        path = Path(path)
        self.to_dataframe().to_csv(path, index=False, encoding="utf-8")
        logger.info(f"Wrote {len(self.sites)} rows to {path}")
        return path


class ReportViewModelBuilder:
    """Packages ranked sites, statistics and config into a ViewModel."""

    def __init__(self, table: Optional[RiskCategoryTable] = None):
        self.table = table if table is not None else DEFAULT_CATEGORIES

    def build(
        self,
        sorted_sites: Sequence[ClassifiedSite],
        statistics: Statistics,
        config: ScoringConfig,
    ) -> ViewModel:
        return ViewModel(
            scoring_config=config,
            statistics=statistics,
            sites=tuple(sorted_sites),
            categories=self.table,
        )
