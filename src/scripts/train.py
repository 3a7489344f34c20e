#!/usr/bin/env python3
"""
Training script for the fake-news Naive Bayes classifier.

Loads labeled articles from a TSV file, estimates the proportion table and
saves it as JSON so that evaluation and classification can reuse it.
"""

import argparse
import json
import logging
import os

from newsbayes.config import DEFAULT_CONFIG, get_config
from newsbayes.data import load_examples_from_tsv
from newsbayes.estimator import ProportionTable, build_proportion_table

# Configure logging
logging.basicConfig(level=logging.INFO, format=DEFAULT_CONFIG['logging']['format'])


def save_table(table: ProportionTable, output_dir: str) -> str:
    """Write the table to <output_dir>/proportions.json and return the path."""
    os.makedirs(output_dir, exist_ok=True)
    table_file = os.path.join(output_dir, DEFAULT_CONFIG['output']['table_file_name'])
    with open(table_file, "w", encoding='utf-8') as writer:
        json.dump(table.to_dict(), writer, indent=4)
    return table_file


def load_table(table_file: str) -> ProportionTable:
    """Read a table written by save_table()."""
    with open(table_file, "r", encoding='utf-8') as reader:
        return ProportionTable.from_dict(json.load(reader))


def main(args):
    """
    Load the training data, build the proportion table and save it.

    Returns:
        The path of the saved table, or None if no examples could be loaded.
    """
    config = get_config()
    logging.info("Starting training process...")
    logging.info(f"Configuration: {args}")

    examples = load_examples_from_tsv(args.train_file, config.labels)
    if not examples:
        logging.error(f"No training examples loaded from {args.train_file}. Exiting.")
        return None

    table = build_proportion_table(examples, config.labels, config.modeled_attributes)

    for label in table.labels:
        logging.info(f"Prior P({label}) = {table.prior(label):.4f} ({table.class_counts[label]} examples)")
    for attribute, values in table.modeled_attributes:
        for value in values:
            summary = ", ".join(f"{label}={table.conditional(attribute, value, label):.4f}" for label in table.labels)
            logging.debug(f"P({attribute}={value} | class): {summary}")

    table_file = save_table(table, args.output_dir)
    logging.info(f"Training complete. Proportion table saved to: {table_file}")
    return table_file


if __name__ == "__main__":
    config = get_config()
    logging.getLogger().setLevel(config.log_level)

    parser = argparse.ArgumentParser(
        description="Estimate Naive Bayes proportions from labeled articles.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--train_file", type=str, default="data/train.tsv", help="Path to the training data TSV file.")
    parser.add_argument("--output_dir", type=str, default=config.output_dir, help="Directory to save the proportion table.")

    args = parser.parse_args()
    main(args)
