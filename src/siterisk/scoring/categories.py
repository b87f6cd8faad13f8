"""Risk categories and score classification."""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from siterisk.exceptions import ConfigurationError


@dataclass(frozen=True)
class RiskCategory:
    """A named, inclusive score range. max_score=None means no upper bound."""

    name: str
    min_score: int
    max_score: Optional[int]
    color: str
    rank: int = 0

    def contains(self, score: int) -> bool:
        if score < self.min_score:
            return False
        return self.max_score is None or score <= self.max_score

    @property
    def label(self) -> str:
        """Human-readable range, e.g. '4-6' or '10+'."""
        if self.max_score is None:
            return f"{self.min_score}+"
        if self.max_score == self.min_score:
            return str(self.min_score)
        return f"{self.min_score}-{self.max_score}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "min": self.min_score,
            "max": self.max_score,
            "color": self.color,
            "rank": self.rank,
        }


class RiskCategoryTable:
    """
    Ordered, validated set of risk categories.

    Ranges must start at 0, be contiguous and non-overlapping, and end in a
    single open-ended category, so every score >= 0 maps to exactly one
    category. Violations raise ConfigurationError at construction.
    """

    def __init__(self, categories: Iterable[RiskCategory]):
        ordered = sorted(categories, key=lambda c: c.min_score)
        if not ordered:
            raise ConfigurationError("Risk category table is empty")

        names = [c.name for c in ordered]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate risk category names: {', '.join(duplicates)}")

        if ordered[0].min_score != 0:
            raise ConfigurationError(
                f"Lowest risk category '{ordered[0].name}' starts at "
                f"{ordered[0].min_score}, expected 0"
            )

        for current, following in zip(ordered, ordered[1:]):
            if current.max_score is None:
                raise ConfigurationError(
                    f"Only the highest risk category may be open-ended, "
                    f"but '{current.name}' has no upper bound"
                )
            if current.max_score < current.min_score:
                raise ConfigurationError(
                    f"Risk category '{current.name}' has max {current.max_score} "
                    f"below min {current.min_score}"
                )
            if following.min_score <= current.max_score:
                raise ConfigurationError(
                    f"Risk categories '{current.name}' and '{following.name}' overlap"
                )
            if following.min_score != current.max_score + 1:
                raise ConfigurationError(
                    f"Gap between risk categories '{current.name}' and '{following.name}': "
                    f"scores {current.max_score + 1}-{following.min_score - 1} are not covered"
                )

        if ordered[-1].max_score is not None:
            raise ConfigurationError(
                f"Highest risk category '{ordered[-1].name}' must be open-ended"
            )

        # Rank follows severity: 0 for the lowest range.
        self._categories = tuple(
            RiskCategory(c.name, c.min_score, c.max_score, c.color, rank)
            for rank, c in enumerate(ordered)
        )

    @classmethod
    def from_definitions(cls, definitions: Iterable[Mapping[str, Any]]) -> "RiskCategoryTable":
        """
        Build a table from plain mappings.

        Each mapping needs ``name`` and ``min``; ``max`` may be omitted or
        None for the open-ended top category; ``color`` defaults to grey.
        """
        categories = []
        for i, item in enumerate(definitions):
            try:
                name = str(item["name"])
                min_score = int(item["min"])
            except (KeyError, TypeError, ValueError) as e:
                raise ConfigurationError(f"Risk category {i + 1}: {e}") from e
            max_score = item.get("max")
            if max_score is not None:
                try:
                    max_score = int(max_score)
                except (TypeError, ValueError) as e:
                    raise ConfigurationError(f"Risk category '{name}': invalid max {max_score!r}") from e
            categories.append(RiskCategory(name, min_score, max_score, str(item.get("color") or "#7f8c8d")))
        return cls(categories)

    def __iter__(self):
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    @property
    def names(self) -> list[str]:
        return [c.name for c in self._categories]

    def lookup(self, score: int) -> Optional[RiskCategory]:
        for category in self._categories:
            if category.contains(score):
                return category
        return None

    def to_list(self) -> list[dict]:
        return [c.to_dict() for c in self._categories]


DEFAULT_CATEGORIES = RiskCategoryTable(
    [
        RiskCategory("No Risk", 0, 0, "#27ae60"),
        RiskCategory("Low", 1, 3, "#2ecc71"),
        RiskCategory("Medium", 4, 6, "#f1c40f"),
        RiskCategory("High", 7, 9, "#e67e22"),
        RiskCategory("Critical", 10, None, "#c0392b"),
    ]
)


class RiskClassifier:
    """Maps scores to categories using a validated table."""

    def __init__(self, table: Optional[RiskCategoryTable] = None):
        self.table = table if table is not None else DEFAULT_CATEGORIES

    def classify(self, score: int) -> RiskCategory:
        """
        Get the risk category for a score.

        Raises:
            ConfigurationError: if no category covers the score (only
                possible for negative scores)
        """
        category = self.table.lookup(score)
        if category is None:
            raise ConfigurationError(f"No risk category covers score {score}")
        return category
