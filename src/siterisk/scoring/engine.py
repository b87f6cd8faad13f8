"""Site risk scoring engine implementation."""

from typing import Optional

from siterisk.scoring.factors import ScoringConfig, ScoredSite, SiteRecord


class SiteRiskScorer:
    """
    Weighted-factor scoring for site exposure.

    Score = sum of the weights of every triggered factor
    Range: 0+ (higher = riskier)

    Factors are evaluated in a fixed order and each triggered factor adds
    one reason, even when its weight is 0.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config if config is not None else ScoringConfig()

    def score(self, site: SiteRecord, config: Optional[ScoringConfig] = None) -> tuple[int, tuple[str, ...]]:
        """
        Calculate the score for one site.

        Args:
            site: Parsed site record
            config: Weights to use (defaults to the scorer's config)

        Returns:
            (score, reasons) with reasons in factor order
        """
        cfg = config if config is not None else self.config
        total = 0
        reasons = []

        # Factor 1: Public privacy
        if site.is_public:
            total += cfg.public_site
            reasons.append("Public site")

        # Factor 2: Everyone Except External Users grants
        eeeu = site.eeeu_count or 0
        if eeeu > 0:
            total += cfg.eeeu_permissions
            reasons.append(f"EEEU permissions ({eeeu})")

        # Factor 3: Everyone grants
        everyone = site.everyone_count or 0
        if everyone > 0:
            total += cfg.everyone_permissions
            reasons.append(f"Everyone permissions ({everyone})")

        # Factor 4: Anonymous sharing links
        links = site.anyone_link_count or 0
        if links > 0:
            total += cfg.anyone_links
            reasons.append(f"Anyone links ({links})")

        # Factor 5: Missing sensitivity label
        if not site.has_sensitivity_label:
            total += cfg.no_sensitivity_label
            reasons.append("No sensitivity label")

        # Factor 6: Broad audience
        users = site.user_count or 0
        if users >= cfg.user_count_threshold:
            total += cfg.high_user_count
            reasons.append(f"High user count ({users} >= {cfg.user_count_threshold})")

        # Negative weights may pull the sum below zero
        return max(0, total), tuple(reasons)

    def score_site(self, site: SiteRecord, config: Optional[ScoringConfig] = None) -> ScoredSite:
        """Score a site and wrap the result."""
        value, reasons = self.score(site, config)
        return ScoredSite(site=site, score=value, reasons=reasons)
