#!/usr/bin/env python3
"""
Caching module for the fake-news Naive Bayes classifier.

Proportion tables are keyed by a fingerprint of the training set and the
estimator settings, so a training set is only aggregated once. Tables live in
an in-memory TTL cache and, optionally, as JSON files on disk.
"""

import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union

from cachetools import TTLCache

from .estimator import ModeledAttributes, ProportionTable, build_proportion_table
from .records import DEFAULT_LABELS, MODELED_ATTRIBUTES, LabeledExample

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


def fingerprint(
    examples: Sequence[LabeledExample],
    labels: Tuple[str, str] = DEFAULT_LABELS,
    modeled_attributes: ModeledAttributes = MODELED_ATTRIBUTES
) -> str:
    """Stable key for a training set and the settings used to estimate from it."""
    payload = {
        "labels": list(labels),
        "attributes": [[attribute, list(values)] for attribute, values in modeled_attributes],
        "examples": [list(example.features.to_row()) + [example.label] for example in examples],
    }
    key_data = json.dumps(payload, separators=(",", ":"))
    return hashlib.md5(key_data.encode('utf-8')).hexdigest()


class TableCache:
    """Memory and file cache of ProportionTables."""

    def __init__(
        self,
        max_size: int = 128,
        ttl_seconds: int = 3600,  # 1 hour default
        cache_dir: Optional[Union[str, Path]] = None,
        enable_file_cache: bool = True
    ):
        """
        Initialize the cache.

        Args:
            max_size: Maximum number of tables to keep in memory
            ttl_seconds: Time to live for cache entries in seconds
            cache_dir: Directory for file-based caching (optional)
            enable_file_cache: Whether to enable file-based caching
        """
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self.enable_file_cache = enable_file_cache
        self.memory_cache: TTLCache = TTLCache(maxsize=max_size, ttl=ttl_seconds)

        if enable_file_cache and cache_dir:
            self.cache_dir = Path(cache_dir)
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        else:
            self.cache_dir = None

        self.cache_hits = 0
        self.cache_misses = 0

    def _get_cache_file_path(self, key: str) -> Optional[Path]:
        if not self.cache_dir:
            return None
        return self.cache_dir / f"{key}.json"

    def _load_from_file(self, key: str) -> Optional[ProportionTable]:
        cache_file = self._get_cache_file_path(key)
        if not cache_file or not cache_file.exists():
            return None

        try:
            with open(cache_file, 'r', encoding='utf-8') as f:
                data = json.load(f)

            if time.time() - data['created_at'] > self.ttl_seconds:
                cache_file.unlink(missing_ok=True)
                return None

            return ProportionTable.from_dict(data['table'])

        except (IOError, json.JSONDecodeError, KeyError, ValueError) as e:
            logging.debug(f"Failed to load cache file {cache_file}: {e}")
            return None

    def _save_to_file(self, key: str, table: ProportionTable) -> bool:
        cache_file = self._get_cache_file_path(key)
        if not cache_file:
            return False

        try:
            with open(cache_file, 'w', encoding='utf-8') as f:
                json.dump({'created_at': time.time(), 'table': table.to_dict()}, f, indent=2)
            return True
        except (IOError, OSError) as e:
            logging.debug(f"Failed to save cache file {cache_file}: {e}")
            return False

    def get(self, key: str) -> Optional[ProportionTable]:
        """Return the cached table for a fingerprint, or None if absent or expired."""
        cached = self.memory_cache.get(key)
        if cached is not None:
            self.cache_hits += 1
            logging.debug(f"Cache hit for key {key}")
            return cached

        file_entry = self._load_from_file(key)
        if file_entry is not None:
            self.memory_cache[key] = file_entry
            self.cache_hits += 1
            logging.debug(f"File cache hit for key {key}")
            return file_entry

        self.cache_misses += 1
        logging.debug(f"Cache miss for key {key}")
        return None

    def put(self, key: str, table: ProportionTable) -> bool:
        self.memory_cache[key] = table
        if self.enable_file_cache:
            self._save_to_file(key, table)
        logging.debug(f"Cached proportion table for key {key}")
        return True

    def get_or_build(
        self,
        examples: Sequence[LabeledExample],
        labels: Tuple[str, str] = DEFAULT_LABELS,
        modeled_attributes: ModeledAttributes = MODELED_ATTRIBUTES,
        builder: Callable[..., ProportionTable] = build_proportion_table
    ) -> ProportionTable:
        """Return the table for `examples`, building and caching it on a miss."""
        key = fingerprint(examples, labels, modeled_attributes)
        table = self.get(key)
        if table is None:
            table = builder(examples, labels, modeled_attributes)
            self.put(key, table)
        return table

    def clear(self) -> int:
        """Clear all cache entries and return the number of entries cleared."""
        memory_count = len(self.memory_cache)
        self.memory_cache.clear()

        file_count = 0
        if self.cache_dir and self.cache_dir.exists():
            for cache_file in self.cache_dir.glob("*.json"):
                try:
                    cache_file.unlink()
                    file_count += 1
                except OSError as e:
                    logging.warning(f"Failed to remove cache file {cache_file}: {e}")

        total_cleared = memory_count + file_count
        self.cache_hits = 0
        self.cache_misses = 0

        logging.info(f"Cleared {total_cleared} cache entries ({memory_count} memory, {file_count} file)")
        return total_cleared

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        total_requests = self.cache_hits + self.cache_misses
        hit_rate = (self.cache_hits / total_requests * 100) if total_requests > 0 else 0

        return {
            'cache_hits': self.cache_hits,
            'cache_misses': self.cache_misses,
            'hit_rate_percent': hit_rate,
            'cache_size': len(self.memory_cache),
            'max_size': self.max_size,
            'ttl_seconds': self.ttl_seconds,
            'file_cache_enabled': self.cache_dir is not None,
            'cache_dir': str(self.cache_dir) if self.cache_dir else None
        }


# Global cache instance
_cache_instance: Optional[TableCache] = None


def get_cache(cache_dir: Optional[Union[str, Path]] = None) -> TableCache:
    """Get the global cache instance; `cache_dir` only applies on first use."""
    global _cache_instance
    if _cache_instance is None:
        _cache_instance = TableCache(cache_dir=cache_dir, enable_file_cache=cache_dir is not None)
    return _cache_instance


def set_cache(cache: Optional[TableCache]) -> None:
    """Set (or reset with None) the global cache instance."""
    global _cache_instance
    _cache_instance = cache
