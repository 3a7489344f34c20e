#!/usr/bin/env python3
"""
Evaluation Script for the fake-news Naive Bayes classifier.

This script loads (or builds) a proportion table, classifies every article of
an evaluation set, and computes metrics including confusion matrix, accuracy,
precision, recall, and F1-score. The fake class is the positive class.
"""

import argparse
import json
import logging
import os
import time

import numpy as np
from sklearn.metrics import accuracy_score, confusion_matrix, precision_recall_fscore_support
from tqdm import tqdm

from newsbayes.cache import get_cache
from newsbayes.config import DEFAULT_CONFIG, get_config
from newsbayes.data import load_data_from_tsv
from newsbayes.model import NaiveBayesClassifier
from scripts.train import load_table

# Configure logging
logging.basicConfig(level=logging.INFO, format=DEFAULT_CONFIG['logging']['format'])


def compute_metrics(labels, preds):
    """
    Computes evaluation metrics from predictions (1 = fake, 0 = genuine).
    """
    if labels is None or preds is None or len(labels) != len(preds):
        logging.error("Invalid input for compute_metrics. Labels or preds empty or lengths differ.")
        return {
            'accuracy': 0.0,
            'f1': 0.0,
            'precision': 0.0,
            'recall': 0.0,
            'confusion_matrix': [[0, 0], [0, 0]],
            'support': 0
        }

    precision, recall, f1, _ = precision_recall_fscore_support(
        labels, preds, average='binary', zero_division=0
    )
    acc = accuracy_score(labels, preds)
    cm = confusion_matrix(labels, preds, labels=[0, 1])

    # Guarantee 2x2 matrix
    if cm.shape != (2, 2):
        cm_fixed = np.zeros((2, 2), dtype=int)
        cm_fixed[:cm.shape[0], :cm.shape[1]] = cm
        cm = cm_fixed

    return {
        'accuracy': float(acc),
        'f1': float(f1),
        'precision': float(precision),
        'recall': float(recall),
        'confusion_matrix': cm.tolist(),
        'support': int(len(labels))
    }


def build_classifier(args, config) -> NaiveBayesClassifier:
    """Classifier from a saved table when given, otherwise trained from --train_file."""
    classifier = NaiveBayesClassifier.from_config(config)
    if args.table_file:
        logging.info(f"Loading proportion table from: {args.table_file}")
        return classifier.use_table(load_table(args.table_file))

    train_data = load_data_from_tsv(train_file=args.train_file, labels=config.labels)['train']
    table = get_cache(config.cache_dir).get_or_build(train_data, config.labels, config.modeled_attributes)
    return classifier.use_table(table)


def main(args):
    """
    Main function to load data, run classification, evaluate, and save results.

    Returns:
        The evaluation results dictionary, or None when nothing could be evaluated.
    """
    config = get_config()
    logging.info("Starting evaluation process...")
    logging.info(f"Configuration: {args}")

    if not args.table_file and not args.train_file:
        logging.error("Either --table_file or --train_file must be provided.")
        return None

    # --- 1. Load Evaluation Data ---
    logging.info(f"Loading evaluation data from: {args.eval_file}")
    try:
        classifier = build_classifier(args, config)
        # Ground truth is read with the labels the table was trained on
        eval_data = load_data_from_tsv(eval_file=args.eval_file, labels=classifier.labels)['test']
    except (OSError, ValueError) as e:
        logging.error(f"Failed to load data: {e}")
        return None

    if not eval_data:
        logging.error(f"No evaluation data loaded from {args.eval_file}. Exiting.")
        return None

    logging.info(f"Evaluation data size: {len(eval_data)}")

    # --- 2. Run Classification ---
    fake_label = classifier.labels[0]
    true_labels = []
    predicted_labels = []
    degenerate = 0
    start_time = time.time()

    for example in tqdm(eval_data, desc="Classifying", disable=not args.progress):
        result = classifier.predict(example.features)
        true_labels.append(1 if example.label == fake_label else 0)
        predicted_labels.append(1 if result.is_fake else 0)
        if result.is_degenerate:
            degenerate += 1

    duration = time.time() - start_time
    logging.info(f"Classification finished in {duration:.2f} seconds.")
    logging.info(f"Degenerate (zero partial score) classifications: {degenerate}")

    # --- 3. Compute Metrics ---
    logging.info("Computing evaluation metrics...")
    eval_results = compute_metrics(true_labels, predicted_labels)

    eval_results['likelihood_formula'] = classifier.formula
    eval_results['decision_threshold'] = classifier.threshold
    eval_results['eval_file'] = args.eval_file
    eval_results['total_samples'] = len(eval_data)
    eval_results['degenerate_classifications'] = degenerate
    eval_results['duration_seconds'] = duration
    eval_results['cache_stats'] = get_cache(config.cache_dir).get_stats()

    # --- 4. Print and Save Results ---
    print("\n--- Naive Bayes Evaluation Results ---")
    print("=" * 50)
    print(f"  Likelihood formula: {eval_results['likelihood_formula']}")
    print(f"  Decision threshold: {eval_results['decision_threshold']}")
    print(f"  Total samples: {eval_results['total_samples']}")
    print(f"  Degenerate classifications: {eval_results['degenerate_classifications']}")

    print("\nCLASSIFICATION METRICS:")
    for key in ('accuracy', 'precision', 'recall', 'f1'):
        print(f"  {key.capitalize()}: {eval_results[key]:.4f}")
    print("  Confusion Matrix (TN, FP / FN, TP):")
    print(f"    {eval_results['confusion_matrix'][0]}")
    print(f"    {eval_results['confusion_matrix'][1]}")

    os.makedirs(args.output_dir, exist_ok=True)
    output_eval_file = os.path.join(args.output_dir, DEFAULT_CONFIG['output']['results_file_name'])
    logging.info(f"Saving evaluation results to: {output_eval_file}")
    try:
        with open(output_eval_file, "w", encoding='utf-8') as writer:
            json.dump(eval_results, writer, indent=4)
    except OSError as e:
        logging.error(f"Failed to save results to {output_eval_file}: {e}")

    logging.info("Evaluation complete.")
    return eval_results


if __name__ == "__main__":
    config = get_config()
    logging.getLogger().setLevel(config.log_level)

    parser = argparse.ArgumentParser(
        description="Evaluate the Naive Bayes fake-news classifier on labeled articles.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--eval_file", type=str, required=True, help="Path to the evaluation data TSV file.")
    parser.add_argument("--table_file", type=str, default=None, help="Proportion table saved by scripts.train.")
    parser.add_argument("--train_file", type=str, default=None, help="Training TSV used when no table file is given.")
    parser.add_argument("--output_dir", type=str, default=config.output_dir, help="Directory to save evaluation results.")
    parser.add_argument("--no_progress", dest="progress", action="store_false", help="Disable the progress bar.")

    args = parser.parse_args()
    main(args)
