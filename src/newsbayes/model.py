#!/usr/bin/env python3
"""
Likelihood combiner and classification driver for the fake-news Naive Bayes classifier.

This module multiplies class priors and conditional proportions into per-class
partial scores, combines them into a likelihood score for the fake class, and
maps that score to a label.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .config import AppConfig, LIKELIHOOD_FORMULAS
from .estimator import ModeledAttributes, ProportionTable, build_proportion_table
from .records import DEFAULT_LABELS, MODELED_ATTRIBUTES, FeatureVector, LabeledExample

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

DEFAULT_FORMULA = "literal"
DEFAULT_THRESHOLD = 0.5


@dataclass
class ClassificationResult:
    """Result of classifying one article."""
    score: float  # Likelihood score for class A; not bounded to [0, 1]
    label: str  # Decided label
    labels: Tuple[str, str] = DEFAULT_LABELS
    class_a_score: Optional[float] = None  # Partial score of class A
    class_b_score: Optional[float] = None  # Partial score of class B
    formula: str = DEFAULT_FORMULA
    evidence: Dict[str, str] = field(default_factory=dict)  # Attribute values consulted

    @property
    def is_fake(self) -> bool:
        """Check if the article was classified into class A (fake)."""
        return self.label == self.labels[0]

    @property
    def is_genuine(self) -> bool:
        """Check if the article was classified into class B (genuine)."""
        return self.label == self.labels[1]

    @property
    def is_degenerate(self) -> bool:
        """True when a zero partial score short-circuited the ratio."""
        return self.class_a_score == 0.0 or self.class_b_score == 0.0


def partial_score(prior: float, conditionals: Sequence[float]) -> float:
    """Naive Bayes numerator for one class: prior times every conditional."""
    return math.prod([prior, *conditionals])


def classify(
    class_a_prior: float,
    class_a_conditionals: Sequence[float],
    class_b_prior: float,
    class_b_conditionals: Sequence[float],
    formula: str = DEFAULT_FORMULA
) -> float:
    """
    Combine the two classes' evidence into a likelihood score for class A.

    A zero class A score returns 1.0 and otherwise a zero class B score returns
    0.0, whichever formula is selected. Past those cases:
      - 'literal':    scoreA / (scoreA * scoreB), which reduces to 1 / scoreB
      - 'normalized': scoreA / (scoreA + scoreB)

    Raises:
        ValueError: If the formula name is not supported
    """
    if formula not in LIKELIHOOD_FORMULAS:
        raise ValueError(f"Unsupported likelihood formula: {formula}. Use 'literal' or 'normalized'.")

    score_a = partial_score(class_a_prior, class_a_conditionals)
    score_b = partial_score(class_b_prior, class_b_conditionals)

    if score_a == 0:
        return 1.0
    if score_b == 0:
        return 0.0

    if formula == "literal":
        return score_a / (score_a * score_b)
    return score_a / (score_a + score_b)


def decide(score: float, labels: Tuple[str, str] = DEFAULT_LABELS, threshold: float = DEFAULT_THRESHOLD) -> str:
    """Map a score to a label: below the threshold is class B, otherwise class A."""
    if score < threshold:
        return labels[1]
    return labels[0]


def classify_values(
    table: ProportionTable,
    values: Mapping[str, str],
    formula: str = DEFAULT_FORMULA,
    threshold: float = DEFAULT_THRESHOLD
) -> ClassificationResult:
    """
    Classify from explicit values for the table's modeled attributes.

    Args:
        table: Proportions learned from the training set
        values: attribute -> value for every modeled attribute; any other
                attributes are ignored
        formula: 'literal' or 'normalized'
        threshold: Score at or above which class A is chosen

    Returns:
        ClassificationResult with the score and decided label

    Raises:
        ValueError: If a modeled attribute has no value
    """
    class_a_label, class_b_label = table.labels
    attributes = [attribute for attribute, _values in table.modeled_attributes]

    missing = [attribute for attribute in attributes if attribute not in values]
    if missing:
        raise ValueError(f"Missing values for modeled attributes: {', '.join(missing)}")

    evidence = {attribute: values[attribute] for attribute in attributes}
    class_a_conditionals = [table.conditional(a, v, class_a_label) for a, v in evidence.items()]
    class_b_conditionals = [table.conditional(a, v, class_b_label) for a, v in evidence.items()]

    score = classify(
        table.prior(class_a_label), class_a_conditionals,
        table.prior(class_b_label), class_b_conditionals,
        formula=formula
    )
    label = decide(score, table.labels, threshold)
    logging.debug(f"Classified {evidence} -> score={score} label={label}")

    return ClassificationResult(
        score=score,
        label=label,
        labels=table.labels,
        class_a_score=partial_score(table.prior(class_a_label), class_a_conditionals),
        class_b_score=partial_score(table.prior(class_b_label), class_b_conditionals),
        formula=formula,
        evidence=evidence,
    )


def classify_record(
    table: ProportionTable,
    query: FeatureVector,
    formula: str = DEFAULT_FORMULA,
    threshold: float = DEFAULT_THRESHOLD
) -> ClassificationResult:
    """Classify an article using its own values for the modeled attributes."""
    values = {attribute: query.value_of(attribute) for attribute, _values in table.modeled_attributes}
    return classify_values(table, values, formula=formula, threshold=threshold)


class NaiveBayesClassifier:
    """Fit-then-predict wrapper around the estimator and the driver."""

    def __init__(
        self,
        labels: Tuple[str, str] = DEFAULT_LABELS,
        modeled_attributes: ModeledAttributes = MODELED_ATTRIBUTES,
        formula: str = DEFAULT_FORMULA,
        threshold: float = DEFAULT_THRESHOLD
    ):
        if formula not in LIKELIHOOD_FORMULAS:
            raise ValueError(f"Unsupported likelihood formula: {formula}. Use 'literal' or 'normalized'.")
        self.labels = tuple(labels)
        self.modeled_attributes = modeled_attributes
        self.formula = formula
        self.threshold = threshold
        self.table: Optional[ProportionTable] = None

    @classmethod
    def from_config(cls, config: AppConfig) -> "NaiveBayesClassifier":
        return cls(
            labels=config.labels,
            modeled_attributes=config.modeled_attributes,
            formula=config.likelihood_formula,
            threshold=config.decision_threshold,
        )

    @property
    def is_fitted(self) -> bool:
        return self.table is not None

    def fit(self, examples: Sequence[LabeledExample]) -> "NaiveBayesClassifier":
        self.table = build_proportion_table(examples, self.labels, self.modeled_attributes)
        return self

    def use_table(self, table: ProportionTable) -> "NaiveBayesClassifier":
        """Adopt a previously built table; its labels replace the configured ones."""
        self.table = table
        self.labels = table.labels
        return self

    def predict(self, query: FeatureVector) -> ClassificationResult:
        if self.table is None:
            raise RuntimeError("Classifier has not been fitted. Call fit() first.")
        return classify_record(self.table, query, formula=self.formula, threshold=self.threshold)

    def predict_many(self, queries: Sequence[FeatureVector]) -> List[ClassificationResult]:
        return [self.predict(query) for query in queries]
