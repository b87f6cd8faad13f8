"""End-to-end analysis of parsed export rows."""

import logging
from typing import Any, Iterable, Mapping, Optional

from siterisk.scoring.categories import DEFAULT_CATEGORIES, RiskCategoryTable, RiskClassifier
from siterisk.scoring.engine import SiteRiskScorer
from siterisk.scoring.factors import ClassifiedSite, ScoringConfig, SiteRecord
from siterisk.services.analysis import AnalysisAggregator
from siterisk.services.report import ReportViewModelBuilder, ViewModel

logger = logging.getLogger(__name__)


def run_analysis(
    rows: Iterable[Mapping[str, Any]],
    config: Optional[ScoringConfig] = None,
    table: Optional[RiskCategoryTable] = None,
) -> ViewModel:
    """
    Score, classify, rank and summarise every row.

    Args:
        rows: Parsed export rows (column name -> value), in input order
        config: Scoring weights (defaults if not provided)
        table: Risk category table (reference table if not provided)

    Returns:
        ViewModel ready for rendering and export
    """
    config = config if config is not None else ScoringConfig()
    table = table if table is not None else DEFAULT_CATEGORIES

    scorer = SiteRiskScorer(config)
    classifier = RiskClassifier(table)

    classified = []
    for index, row in enumerate(rows):
        site = SiteRecord.from_row(row, index=index)
        for message in site.warnings:
            logger.warning(message)
        scored = scorer.score_site(site)
        classified.append(ClassifiedSite.from_scored(scored, classifier.classify(scored.score)))

    logger.info(f"Scored {len(classified)} sites")

    sorted_sites, statistics = AnalysisAggregator(table).aggregate(classified)
    return ReportViewModelBuilder(table).build(sorted_sites, statistics, config)
