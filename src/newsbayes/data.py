#!/usr/bin/env python3
"""
Data handling module for the fake-news Naive Bayes classifier.
Loads labeled articles from TSV files into LabeledExample lists with row-level validation.

Expected columns (tab separated):
    source_trust, length_bucket, headline, date_published, author, keyword_density, label
An optional header row whose first cell is 'source_trust' is skipped. Empty
cells are read as 'unknown'.
"""

import csv
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from .records import DEFAULT_LABELS, FeatureVector, InvalidLabel, LabeledExample

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

COLUMNS = FeatureVector.attribute_names() + ("label",)


def load_examples_from_tsv(
    file_path: Union[str, Path],
    labels: Tuple[str, str] = DEFAULT_LABELS
) -> List[LabeledExample]:
    """Loads a TSV file into a list of LabeledExample.

    Args:
        file_path: Path to the TSV file to load
        labels: The two recognized label values

    Returns:
        List of labeled examples in file order

    Raises:
        FileNotFoundError: When the file path does not exist
        PermissionError: When the file cannot be read due to permissions

    Note:
        - For empty files, return an empty list without raising.
        - Rows with the wrong number of columns or an unrecognized label are
          logged as warnings and skipped.
    """
    examples: List[LabeledExample] = []
    file_path = Path(file_path)

    try:
        with open(file_path, mode='r', encoding='utf-8', newline='') as file:
            reader = csv.reader(file, delimiter='\t')
            for i, row in enumerate(reader, start=1):  # 1-indexed for user-friendly line numbers
                if not row or not any(cell.strip() for cell in row):
                    continue

                if i == 1 and row[0].strip() == COLUMNS[0]:
                    logging.debug(f"Skipping header row in {file_path}")
                    continue

                if len(row) != len(COLUMNS):
                    logging.warning(
                        f"Skipping malformed row (expected {len(COLUMNS)} columns, got {len(row)}) "
                        f"in {file_path} at line {i}: {row[:2]}..."
                    )
                    continue

                *values, label = row
                try:
                    example = LabeledExample(FeatureVector.from_row(values), label.strip(), labels)
                except InvalidLabel as e:
                    logging.warning(f"{e} in {file_path} at line {i}. Skipping row.")
                    continue

                examples.append(example)

    except (IOError, OSError) as e:
        logging.error(f"Error reading file {file_path}: {e}")
        raise

    logging.info(f"Successfully loaded {len(examples)} valid examples from {file_path}")
    return examples


def save_examples_to_tsv(
    examples: List[LabeledExample],
    file_path: Union[str, Path],
    header: bool = True
) -> None:
    """Write examples in the format read by load_examples_from_tsv."""
    file_path = Path(file_path)
    with open(file_path, mode='w', encoding='utf-8', newline='') as file:
        writer = csv.writer(file, delimiter='\t', lineterminator='\n')
        if header:
            writer.writerow(COLUMNS)
        for example in examples:
            writer.writerow(example.features.to_row() + (example.label,))
    logging.info(f"Wrote {len(examples)} examples to {file_path}")


def load_data_from_tsv(
    train_file: Optional[Union[str, Path]] = None,
    eval_file: Optional[Union[str, Path]] = None,
    test_size: Optional[float] = None,
    labels: Tuple[str, str] = DEFAULT_LABELS
) -> Dict[str, List[LabeledExample]]:
    """
    Loads data from TSV files and returns a dictionary of data splits.

    Args:
        train_file: Path to the training TSV file. Can be None if only eval is needed.
        eval_file: Path to the evaluation TSV file.
                   If None and train_file is provided, the train_file may be split.
        test_size: Fraction of training data to hold out for evaluation if eval_file is None.
                   Must be between 0 and 1. If None, no split is performed.
        labels: The two recognized label values.

    Returns:
        A dictionary containing 'train' and 'test' splits.

    Raises:
        ValueError: If test_size is not between 0 and 1, or if neither file is provided.
        FileNotFoundError: If specified files don't exist.
    """
    datasets: Dict[str, List[LabeledExample]] = {}

    # Input validation
    if not train_file and not eval_file:
        raise ValueError("At least one data file (train_file or eval_file) must be provided.")

    if test_size is not None and not (0 < test_size < 1):
        raise ValueError(f"test_size must be between 0 and 1, got {test_size}")

    if train_file:
        logging.info(f"Loading training data from: {train_file}")
        train_data = load_examples_from_tsv(train_file, labels)

        if eval_file:
            logging.info(f"Loading evaluation data from: {eval_file}")
            datasets['train'] = train_data
            datasets['test'] = load_examples_from_tsv(eval_file, labels)
        elif not train_data:
            datasets['train'] = []
            datasets['test'] = []
            logging.warning("Training file is empty, both splits will be empty")
        elif test_size is None:
            logging.info("No evaluation file provided and no test_size specified. Returning all data in 'train' and empty 'test'.")
            datasets['train'] = train_data
            datasets['test'] = []
        else:
            logging.info(f"No evaluation file provided. Splitting train data with test_size={test_size}")
            # Deterministic split without shuffling for reproducibility
            split_idx = int(len(train_data) * (1 - test_size))
            datasets['train'] = train_data[:split_idx]
            datasets['test'] = train_data[split_idx:]
            logging.info(f"Split complete. Train size: {len(datasets['train'])}, Test size: {len(datasets['test'])}")

    else:
        logging.info(f"Loading evaluation data only from: {eval_file}")
        datasets['test'] = load_examples_from_tsv(eval_file, labels)
        datasets['train'] = []
        logging.info(f"Loaded {len(datasets['test'])} evaluation samples")

    logging.info("Data loading complete.")
    return datasets
