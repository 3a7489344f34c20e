#!/usr/bin/env python3
"""
Configuration management module for the fake-news Naive Bayes classifier.

Settings come from environment variables (prefixed NEWSBAYES_), an optional
.env file, and sensible defaults. Values are validated by pydantic.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .records import FAKE_LABEL, GENUINE_LABEL, MODELED_ATTRIBUTES

LIKELIHOOD_FORMULAS = ("literal", "normalized")

# Default configuration values
DEFAULT_CONFIG = {
    'model': {
        'class_a_label': FAKE_LABEL,
        'class_b_label': GENUINE_LABEL,
        'likelihood_formula': 'literal',
        'decision_threshold': 0.5
    },
    'output': {
        'output_dir': 'results',
        'table_file_name': 'proportions.json',
        'results_file_name': 'evaluation_results.json'
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(levelname)s - %(message)s'
    }
}

# Configure logging
logging.basicConfig(level=DEFAULT_CONFIG['logging']['level'], format=DEFAULT_CONFIG['logging']['format'])


class AppConfig(BaseSettings):
    """Application configuration with validation."""

    model_config = SettingsConfigDict(
        env_prefix='NEWSBAYES_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    # Model settings
    class_a_label: str = Field(DEFAULT_CONFIG['model']['class_a_label'])
    class_b_label: str = Field(DEFAULT_CONFIG['model']['class_b_label'])
    likelihood_formula: str = Field(DEFAULT_CONFIG['model']['likelihood_formula'])
    decision_threshold: float = Field(DEFAULT_CONFIG['model']['decision_threshold'])

    # Output settings
    output_dir: str = Field(DEFAULT_CONFIG['output']['output_dir'])
    cache_dir: Optional[str] = Field(None)

    # Logging settings
    log_level: str = Field(DEFAULT_CONFIG['logging']['level'])

    @field_validator('likelihood_formula')
    @classmethod
    def validate_formula(cls, v):
        if v not in LIKELIHOOD_FORMULAS:
            raise ValueError(f'Likelihood formula must be one of {", ".join(LIKELIHOOD_FORMULAS)}')
        return v

    @field_validator('decision_threshold')
    @classmethod
    def validate_threshold(cls, v):
        if not 0.0 <= v <= 1.0:
            raise ValueError('Decision threshold must be between 0 and 1')
        return v

    @field_validator('class_a_label', 'class_b_label')
    @classmethod
    def validate_label(cls, v):
        if not v or not v.strip():
            raise ValueError('Class labels cannot be empty')
        return v.strip()

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f'Unknown log level: {v}')
        return level

    @model_validator(mode='after')
    def validate_distinct_labels(self):
        if self.class_a_label == self.class_b_label:
            raise ValueError('The two class labels must differ')
        return self

    @property
    def labels(self) -> Tuple[str, str]:
        """(class A, class B) labels; class A is the fake class."""
        return (self.class_a_label, self.class_b_label)

    @property
    def modeled_attributes(self):
        return MODELED_ATTRIBUTES


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the application configuration with caching."""
    return AppConfig()


def validate_configuration() -> Dict[str, Any]:
    """Validate the current configuration and return validation results."""
    results = {
        'valid': True,
        'warnings': [],
        'errors': [],
        'config_summary': {}
    }

    try:
        config = get_config()
    except ValidationError as e:
        for error in e.errors():
            location = ".".join(str(part) for part in error['loc']) or 'config'
            results['errors'].append(f"{location}: {error['msg']}")
        results['valid'] = False
        return results

    results['config_summary']['labels'] = f"{config.class_a_label} (fake) / {config.class_b_label} (genuine)"
    results['config_summary']['likelihood_formula'] = config.likelihood_formula
    results['config_summary']['decision_threshold'] = config.decision_threshold
    results['config_summary']['modeled_attributes'] = ", ".join(
        attribute for attribute, _values in config.modeled_attributes
    )
    results['config_summary']['output_dir'] = config.output_dir

    if config.likelihood_formula == 'literal':
        results['warnings'].append(
            "Likelihood formula 'literal' computes scoreA / (scoreA * scoreB); "
            "use 'normalized' for scoreA / (scoreA + scoreB)."
        )

    if config.cache_dir is None:
        results['warnings'].append("No cache directory set. Proportion tables are cached in memory only.")
    else:
        results['config_summary']['cache_dir'] = config.cache_dir

    return results


def print_config_summary():
    """Print a summary of the current configuration."""
    validation = validate_configuration()

    print("Configuration Summary:")
    print("=" * 30)

    if validation['config_summary']:
        print("Settings:")
        for key, value in validation['config_summary'].items():
            print(f"  {key}: {value}")

    if validation['errors']:
        print("\nErrors:")
        for error in validation['errors']:
            print(f"  ❌ {error}")

    if validation['warnings']:
        print("\nWarnings:")
        for warning in validation['warnings']:
            print(f"  ⚠️  {warning}")

    if validation['valid']:
        print("\n✅ Configuration is valid.")
    else:
        print("\n❌ Configuration has errors.")


if __name__ == "__main__":
    print_config_summary()
