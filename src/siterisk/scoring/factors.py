"""Scoring configuration and site data structures."""

import math
import re
import warnings
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional

from siterisk.exceptions import ConfigurationError, MalformedRowWarning
from siterisk.scoring.categories import RiskCategory

# Attribute name -> exported key. Order is the factor evaluation order.
CONFIG_KEYS = {
    "public_site": "PublicSite",
    "eeeu_permissions": "EEEUPermissions",
    "everyone_permissions": "EveryonePermissions",
    "anyone_links": "AnyoneLinks",
    "no_sensitivity_label": "NoSensitivityLabel",
    "high_user_count": "HighUserCount",
    "user_count_threshold": "UserCountThreshold",
}


@dataclass(frozen=True)
class ScoringConfig:
    """Weights for the six risk factors plus the high user count cutoff.

    Weights are plain integers. Zero disables a factor's contribution
    without hiding its reason; negative weights are allowed.
    """

    public_site: int = 3
    eeeu_permissions: int = 3
    everyone_permissions: int = 3
    anyone_links: int = 2
    no_sensitivity_label: int = 2
    high_user_count: int = 2
    user_count_threshold: int = 500

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(
                    f"{CONFIG_KEYS[f.name]} must be an integer, got {value!r}"
                )

    def with_overrides(self, **overrides: Optional[int]) -> "ScoringConfig":
        """Return a new config with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        unknown = set(changes) - set(CONFIG_KEYS)
        if unknown:
            raise ConfigurationError(f"Unknown scoring setting: {', '.join(sorted(unknown))}")
        return replace(self, **changes) if changes else self

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {exported: getattr(self, attr) for attr, exported in CONFIG_KEYS.items()}


# -- Input rows --

# Accepted column headers per field, compared after normalisation.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("Site name", "SiteName", "Site title", "Title", "Name"),
    "url": ("Site URL", "URL", "SiteUrl"),
    "template": ("Template", "Site template"),
    "primary_admin": ("Primary admin", "Primary admin email", "Site admin", "Owner"),
    "tenant_id": ("Tenant ID",),
    "site_id": ("Site ID",),
    "last_activity": ("Last activity date", "Last activity (UTC)", "Last activity", "Last modified"),
    "created": ("Created date", "Site created date", "Created"),
    "privacy": ("Privacy", "Privacy setting", "Visibility"),
    "sensitivity_label": ("Sensitivity label", "Sensitivity", "SensitivityLabel"),
    "eeeu_count": (
        "EEEU permission count",
        "EEEU count",
        "EEEU",
        "Everyone except external users",
    ),
    "everyone_count": ("Everyone permission count", "Everyone count", "Everyone"),
    "anyone_link_count": (
        "Anyone link count",
        "Anyone links",
        "AnyoneLinks",
        "Anonymous link count",
        "Anonymous links",
    ),
    "user_count": (
        "Number of users having access",
        "Users with access",
        "User count",
        "Users",
    ),
}

COUNT_FIELDS = ("eeeu_count", "everyone_count", "anyone_link_count", "user_count")

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def normalize_column(name: Any) -> str:
    """Lower-case a column header and strip everything but letters and digits."""
    return _NON_ALNUM_RE.sub("", str(name).lower())


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def coerce_text(value: Any) -> str:
    """Convert a display or label cell to a stripped string ("" when absent)."""
    if _is_missing(value):
        return ""
    return str(value).strip()


def coerce_count(value: Any) -> tuple[int, bool]:
    """
    Convert a count cell to a non-negative integer.

    Args:
        value: Raw cell value (string, number or None)

    Returns:
        (count, ok) where ok is False when the value was present but could
        not be used and 0 was substituted
    """
    if _is_missing(value):
        return 0, True

    if isinstance(value, bool):
        return int(value), True

    if isinstance(value, (int, float)):
        number = value
    else:
        text = str(value).strip().replace(",", "")
        try:
            number = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return 0, False

    if isinstance(number, float) and (not math.isfinite(number) or not number.is_integer()):
        return 0, False
    number = int(number)
    if number < 0:
        return 0, False
    return number, True


@dataclass(frozen=True)
class SiteRecord:
    """One site row from the permissions export."""

    index: int = 0

    # Display payload, never interpreted by scoring
    name: str = ""
    url: str = ""
    template: str = ""
    primary_admin: str = ""
    tenant_id: str = ""
    site_id: str = ""
    last_activity: str = ""
    created: str = ""

    # Scoring inputs
    privacy: str = ""
    sensitivity_label: str = ""
    eeeu_count: int = 0
    everyone_count: int = 0
    anyone_link_count: int = 0
    user_count: int = 0

    # Coercion problems found while reading the row
    warnings: tuple[str, ...] = ()
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_public(self) -> bool:
        """Whether the privacy state is Public (case-insensitive)."""
        return (self.privacy or "").strip().lower() == "public"

    @property
    def has_sensitivity_label(self) -> bool:
        return bool((self.sensitivity_label or "").strip())

    @classmethod
    def from_row(cls, row: Mapping[str, Any], index: int = 0) -> "SiteRecord":
        """
        Build a record from a parsed row.

        Column headers are matched leniently against FIELD_ALIASES. Absent
        columns fall back to empty/zero. Count cells that are present but
        not numeric become 0 and raise a MalformedRowWarning.
        """
        normalized = {}
        columns = {}
        for key, value in row.items():
            norm = normalize_column(key)
            if norm not in normalized:
                normalized[norm] = value
                columns[norm] = key

        values: dict[str, Any] = {}
        found_in: dict[str, Any] = {}
        for attr, aliases in FIELD_ALIASES.items():
            for alias in aliases:
                norm = normalize_column(alias)
                if norm in normalized:
                    values[attr] = normalized[norm]
                    found_in[attr] = columns[norm]
                    break

        kwargs: dict[str, Any] = {}
        problems = []
        for attr in FIELD_ALIASES:
            raw_value = values.get(attr)
            if attr in COUNT_FIELDS:
                count, ok = coerce_count(raw_value)
                if not ok:
                    message = (
                        f"Row {index}: invalid value {raw_value!r} in column "
                        f"'{found_in[attr]}', treated as 0"
                    )
                    warnings.warn(message, MalformedRowWarning, stacklevel=2)
                    problems.append(message)
                kwargs[attr] = count
            else:
                kwargs[attr] = coerce_text(raw_value)

        return cls(
            index=index,
            warnings=tuple(problems),
            raw=MappingProxyType(dict(row)),
            **kwargs,
        )


# -- Results --


@dataclass(frozen=True)
class ScoredSite:
    """A site with its score and the reasons that produced it."""

    site: SiteRecord
    score: int = 0
    reasons: tuple[str, ...] = ()

    @property
    def warnings(self) -> tuple[str, ...]:
        return self.site.warnings


@dataclass(frozen=True)
class ClassifiedSite:
    """A scored site placed in a risk category."""

    site: SiteRecord
    score: int
    reasons: tuple[str, ...]
    category: RiskCategory

    @classmethod
    def from_scored(cls, scored: ScoredSite, category: RiskCategory) -> "ClassifiedSite":
        return cls(site=scored.site, score=scored.score, reasons=scored.reasons, category=category)

    @property
    def scored(self) -> ScoredSite:
        return ScoredSite(site=self.site, score=self.score, reasons=self.reasons)

    @property
    def warnings(self) -> tuple[str, ...]:
        return self.site.warnings

    @property
    def reasons_text(self) -> str:
        """Reasons joined for display, in evaluation order."""
        return "; ".join(self.reasons)
