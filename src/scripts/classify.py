#!/usr/bin/env python3
"""
Classify a single article with the fake-news Naive Bayes classifier and print the outcome.
"""

import argparse
import logging

from newsbayes.cache import get_cache
from newsbayes.config import DEFAULT_CONFIG, LIKELIHOOD_FORMULAS, get_config
from newsbayes.data import load_examples_from_tsv
from newsbayes.model import ClassificationResult, classify_values
from newsbayes.records import FeatureVector, UNKNOWN
from scripts.train import load_table

# Configure logging
logging.basicConfig(level=logging.INFO, format=DEFAULT_CONFIG['logging']['format'])


def parse_overrides(pairs):
    """Turn ['attribute=value', ...] into a dict; raises ValueError on bad input."""
    overrides = {}
    for pair in pairs or []:
        attribute, sep, value = pair.partition("=")
        if not sep or not attribute.strip():
            raise ValueError(f"Override must look like attribute=value, got '{pair}'")
        overrides[attribute.strip()] = value.strip()
    return overrides


def report(result: ClassificationResult) -> None:
    print(f"Probability article is fake: {result.score}")
    print(f"Classification of new article: {result.label}")


def main(args):
    """
    Classify the article described by args and print the score and label.

    Lookup values default to the article's own attribute values; --override
    replaces the value looked up for one attribute without changing the article.
    """
    config = get_config()

    if args.table_file:
        table = load_table(args.table_file)
    elif args.train_file:
        examples = load_examples_from_tsv(args.train_file, config.labels)
        table = get_cache(config.cache_dir).get_or_build(examples, config.labels, config.modeled_attributes)
    else:
        logging.error("Either --table_file or --train_file must be provided.")
        return None

    article = FeatureVector(
        source_trust=args.source_trust,
        length_bucket=args.length_bucket,
        headline=args.headline,
        date_published=args.date_published,
        author=args.author,
        keyword_density=args.keyword_density,
    )
    values = {attribute: article.value_of(attribute) for attribute, _values in table.modeled_attributes}

    try:
        overrides = parse_overrides(args.override)
    except ValueError as e:
        logging.error(f"Invalid override: {e}")
        return None
    unmodeled = set(overrides) - set(values)
    if unmodeled:
        logging.error(f"Cannot override attributes that are not modeled: {', '.join(sorted(unmodeled))}")
        return None
    if overrides:
        logging.warning(f"Looking up {overrides} instead of the article's own values")
    values.update(overrides)

    result = classify_values(
        table,
        values,
        formula=args.formula or config.likelihood_formula,
        threshold=config.decision_threshold
    )
    report(result)
    return result


if __name__ == "__main__":
    config = get_config()
    logging.getLogger().setLevel(config.log_level)

    parser = argparse.ArgumentParser(
        description="Classify one article as fake or genuine.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--table_file", type=str, default=None, help="Proportion table saved by scripts.train.")
    parser.add_argument("--train_file", type=str, default=None, help="Training TSV used when no table file is given.")
    for attribute in FeatureVector.attribute_names():
        parser.add_argument(f"--{attribute}", type=str, default=UNKNOWN, help=f"Article {attribute.replace('_', ' ')}.")
    parser.add_argument(
        "--override",
        action="append",
        metavar="ATTRIBUTE=VALUE",
        help="Look up VALUE for ATTRIBUTE instead of the article's value. Repeatable."
    )
    parser.add_argument("--formula", type=str, choices=LIKELIHOOD_FORMULAS, default=None, help="Likelihood formula; defaults to configuration.")

    args = parser.parse_args()
    main(args)
