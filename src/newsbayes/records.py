#!/usr/bin/env python3
"""
Record and label model for the fake-news Naive Bayes classifier.

An article is described by a FeatureVector of already-normalized categorical
values. Training articles carry one of two class labels ("false" for fake,
"true" for genuine) wrapped in a LabeledExample.
"""

from dataclasses import dataclass, field, fields
from typing import Dict, Mapping, Sequence, Tuple

UNKNOWN = "unknown"

# Closed enumerations for each attribute
SOURCE_TRUST_VALUES: Tuple[str, ...] = ("trusted", "unreliable")
LENGTH_BUCKET_VALUES: Tuple[str, ...] = ("short", "average", "long")
HEADLINE_VALUES: Tuple[str, ...] = ("standard", "unusual")
DATE_PUBLISHED_VALUES: Tuple[str, ...] = ("low", "average", "high")
AUTHOR_VALUES: Tuple[str, ...] = ("trusted", "unreliable")
KEYWORD_DENSITY_VALUES: Tuple[str, ...] = ("rare", "unindicative", "common")

ATTRIBUTE_VALUES: Dict[str, Tuple[str, ...]] = {
    "source_trust": SOURCE_TRUST_VALUES,
    "length_bucket": LENGTH_BUCKET_VALUES,
    "headline": HEADLINE_VALUES,
    "date_published": DATE_PUBLISHED_VALUES,
    "author": AUTHOR_VALUES,
    "keyword_density": KEYWORD_DENSITY_VALUES,
}

# Only these attributes feed the estimator; headline, date and author are inert
MODELED_ATTRIBUTES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("source_trust", SOURCE_TRUST_VALUES),
    ("length_bucket", LENGTH_BUCKET_VALUES),
    ("keyword_density", KEYWORD_DENSITY_VALUES),
)

FAKE_LABEL = "false"
GENUINE_LABEL = "true"
# (class A, class B); class A is the fake class
DEFAULT_LABELS: Tuple[str, str] = (FAKE_LABEL, GENUINE_LABEL)


class InvalidLabel(ValueError):
    """Raised when a training label is neither of the two recognized values."""

    def __init__(self, label: str, labels: Sequence[str] = DEFAULT_LABELS):
        self.label = label
        self.labels = tuple(labels)
        super().__init__(
            f"Invalid label '{label}'. Expected one of: {', '.join(self.labels)}"
        )


@dataclass(frozen=True)
class FeatureVector:
    """Categorical description of one article.

    Field order is significant: it is the column order used by the TSV loader.
    Values outside an attribute's enumeration are kept as-is and simply never
    match an aggregation bucket.
    """
    source_trust: str = UNKNOWN
    length_bucket: str = UNKNOWN
    headline: str = UNKNOWN
    date_published: str = UNKNOWN
    author: str = UNKNOWN
    keyword_density: str = UNKNOWN

    @classmethod
    def attribute_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def value_of(self, attribute: str) -> str:
        """Return the value of a named attribute.

        Raises:
            ValueError: If the attribute name is not part of the vector
        """
        if attribute not in ATTRIBUTE_VALUES:
            raise ValueError(
                f"Unknown attribute '{attribute}'. "
                f"Expected one of: {', '.join(self.attribute_names())}"
            )
        return getattr(self, attribute)

    def to_row(self) -> Tuple[str, ...]:
        return tuple(getattr(self, name) for name in self.attribute_names())

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "FeatureVector":
        """Build a vector from positional values; blank cells become 'unknown'."""
        names = cls.attribute_names()
        if len(row) != len(names):
            raise ValueError(f"Expected {len(names)} attribute values, got {len(row)}")
        return cls(**{name: (value.strip() or UNKNOWN) for name, value in zip(names, row)})

    def to_dict(self) -> Dict[str, str]:
        return dict(zip(self.attribute_names(), self.to_row()))

    @classmethod
    def from_dict(cls, data: Mapping[str, str]) -> "FeatureVector":
        unexpected = set(data) - set(cls.attribute_names())
        if unexpected:
            raise ValueError(f"Unknown attributes: {', '.join(sorted(unexpected))}")
        return cls(**{name: (data.get(name) or UNKNOWN) for name in cls.attribute_names()})


@dataclass(frozen=True)
class LabeledExample:
    """A training article: its features and its class label."""
    features: FeatureVector
    label: str
    labels: Tuple[str, str] = field(default=DEFAULT_LABELS, repr=False, compare=False)

    def __post_init__(self):
        if self.label not in self.labels:
            raise InvalidLabel(self.label, self.labels)
