#!/usr/bin/env python3
"""
Proportion estimator for the fake-news Naive Bayes classifier.

Turns labeled training articles into a ProportionTable: the prior of each
class and, for every modeled (attribute, value, class) triple, the fraction of
that class's articles taking the value. No smoothing is applied and every
zero denominator yields 0.0.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from .records import DEFAULT_LABELS, MODELED_ATTRIBUTES, LabeledExample

ModeledAttributes = Sequence[Tuple[str, Sequence[str]]]


def partition(
    examples: Sequence[LabeledExample],
    labels: Tuple[str, str] = DEFAULT_LABELS
) -> Tuple[List[LabeledExample], List[LabeledExample]]:
    """Split examples into (class A, class B) by exact label equality.

    Examples whose label matches neither value are left out of both lists.
    """
    class_a_label, class_b_label = labels
    class_a = [example for example in examples if example.label == class_a_label]
    class_b = [example for example in examples if example.label == class_b_label]

    dropped = len(examples) - len(class_a) - len(class_b)
    if dropped:
        logging.warning(
            f"Excluded {dropped} example(s) whose label is neither "
            f"'{class_a_label}' nor '{class_b_label}'"
        )
    return class_a, class_b


def class_prior(examples: Sequence[LabeledExample], total: int) -> float:
    """Fraction of the training set held by `examples` (0.0 for an empty set)."""
    if total == 0:
        return 0.0
    return len(examples) / total


def conditional_proportion(
    class_examples: Sequence[LabeledExample],
    attribute: str,
    value: str
) -> float:
    """Fraction of one class's examples whose `attribute` equals `value`."""
    if not class_examples:
        return 0.0
    matches = sum(1 for example in class_examples if example.features.value_of(attribute) == value)
    return matches / len(class_examples)


@dataclass(frozen=True)
class ProportionTable:
    """Read-only snapshot of the statistics learned from a training set."""
    labels: Tuple[str, str]
    total: int
    class_counts: Mapping[str, int]
    priors: Mapping[str, float]
    # attribute -> value -> label -> proportion
    conditionals: Mapping[str, Mapping[str, Mapping[str, float]]]

    @property
    def modeled_attributes(self) -> Tuple[Tuple[str, Tuple[str, ...]], ...]:
        return tuple((attribute, tuple(values)) for attribute, values in self.conditionals.items())

    def prior(self, label: str) -> float:
        return self.priors.get(label, 0.0)

    def conditional(self, attribute: str, value: str, label: str) -> float:
        """Look up P(attribute = value | label).

        Values outside the attribute's enumeration, including 'unknown', give 0.0.

        Raises:
            ValueError: If the attribute is not modeled by this table
        """
        if attribute not in self.conditionals:
            raise ValueError(
                f"Attribute '{attribute}' is not modeled. "
                f"Modeled attributes: {', '.join(self.conditionals)}"
            )
        return self.conditionals[attribute].get(value, {}).get(label, 0.0)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the table to a JSON-compatible dictionary."""
        return {
            "labels": list(self.labels),
            "total": self.total,
            "class_counts": dict(self.class_counts),
            "priors": dict(self.priors),
            "conditionals": {
                attribute: {value: dict(per_label) for value, per_label in values.items()}
                for attribute, values in self.conditionals.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProportionTable":
        """Rebuild a table saved with to_dict().

        Raises:
            ValueError: If a required key is missing or the labels are malformed
        """
        try:
            labels = tuple(data["labels"])
            if len(labels) != 2:
                raise ValueError(f"Expected exactly two labels, got {len(labels)}")
            return _freeze(
                labels=labels,
                total=int(data["total"]),
                class_counts=data["class_counts"],
                priors=data["priors"],
                conditionals=data["conditionals"],
            )
        except KeyError as e:
            raise ValueError(f"Proportion table is missing key {e}") from e


def _freeze(labels, total, class_counts, priors, conditionals) -> ProportionTable:
    return ProportionTable(
        labels=tuple(labels),
        total=total,
        class_counts=MappingProxyType({label: int(count) for label, count in class_counts.items()}),
        priors=MappingProxyType({label: float(p) for label, p in priors.items()}),
        conditionals=MappingProxyType({
            attribute: MappingProxyType({
                value: MappingProxyType({label: float(p) for label, p in per_label.items()})
                for value, per_label in values.items()
            })
            for attribute, values in conditionals.items()
        }),
    )


def build_proportion_table(
    examples: Sequence[LabeledExample],
    labels: Tuple[str, str] = DEFAULT_LABELS,
    modeled_attributes: ModeledAttributes = MODELED_ATTRIBUTES
) -> ProportionTable:
    """Estimate priors and conditional proportions from labeled examples.

    Args:
        examples: Training articles
        labels: (class A, class B) label values
        modeled_attributes: (attribute, enumerated values) pairs to estimate

    Returns:
        A fully populated, immutable ProportionTable
    """
    total = len(examples)
    partitions = dict(zip(labels, partition(examples, labels)))

    priors = {label: class_prior(members, total) for label, members in partitions.items()}
    conditionals = {
        attribute: {
            value: {
                label: conditional_proportion(members, attribute, value)
                for label, members in partitions.items()
            }
            for value in values
        }
        for attribute, values in modeled_attributes
    }

    logging.info(
        f"Built proportion table from {total} examples "
        + ", ".join(f"{label}={len(members)}" for label, members in partitions.items())
    )
    return _freeze(
        labels=labels,
        total=total,
        class_counts={label: len(members) for label, members in partitions.items()},
        priors=priors,
        conditionals=conditionals,
    )
