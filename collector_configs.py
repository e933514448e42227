"""
Collector Configurations
========================

Configuration settings for the code collector and pre-configured presets
for common use cases.
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from collection_errors import ConfigError

logger = logging.getLogger(__name__)


# gitignore-style patterns, matched against relative paths and basenames
DEFAULT_IGNORE_PATTERNS: List[str] = [
    # Version control
    '.git/',
    '.svn/',
    '.hg/',
    # Dependencies and vendored code
    'node_modules/',
    'bower_components/',
    'jspm_packages/',
    'vendor/',
    '.venv/',
    'venv/',
    # Build output
    'dist/',
    'build/',
    'out/',
    'target/',
    '.next/',
    '.nuxt/',
    '.gradle/',
    '*.egg-info/',
    # Caches
    '__pycache__/',
    '.cache/',
    '.pytest_cache/',
    '.mypy_cache/',
    '.tox/',
    'coverage/',
    '.idea/',
    '.vscode/',
    # Files
    '*.pyc',
    '*.pyo',
    '*.class',
    '*.min.js',
    '*.map',
    '*.lock',
    'package-lock.json',
    '.DS_Store',
    '.env',
]

OUTPUT_FORMATS = ['plain', 'markdown']


@dataclass
class CollectorConfig:
    """Configuration settings for the code collector"""

    # Ignore settings
    ignore_patterns: Optional[List[str]] = None
    extra_ignore_patterns: List[str] = field(default_factory=list)
    apply_ignore_filter: bool = False  # Post-pass over import-based collections

    # Python batch expansion
    python_batch: bool = False
    batch_timeout: float = 60.0

    # Project discovery
    marker_files: List[str] = field(default_factory=list)

    # Output settings
    output_format: str = 'plain'
    show_progress: bool = True
    token_model: str = 'gpt-4o'

    def __post_init__(self) -> None:
        """Validate configuration parameters"""
        if self.ignore_patterns is None:
            self.ignore_patterns = list(DEFAULT_IGNORE_PATTERNS)

        if self.batch_timeout <= 0:
            raise ValueError("batch_timeout must be positive")
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Invalid output_format: {self.output_format}")
        for name in ('ignore_patterns', 'extra_ignore_patterns', 'marker_files'):
            value = getattr(self, name)
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                raise ValueError(f"{name} must be a list of strings")

    @property
    def effective_ignore_patterns(self) -> List[str]:
        """Default (or replaced) patterns followed by the user additions"""
        return list(dict.fromkeys(self.ignore_patterns + self.extra_ignore_patterns))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CollectorConfig':
        """Build a config from a plain dictionary, rejecting unknown keys"""
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a JSON object")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}",
                              details={'unknown_keys': unknown})

        try:
            return cls(**data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration: {e}", cause=e)


class ConfigPresets:
    """Pre-configured settings for common use cases"""

    @staticmethod
    def default() -> CollectorConfig:
        """Import-following collection with the default ignore list"""
        return CollectorConfig()

    @staticmethod
    def smart_filter() -> CollectorConfig:
        """
        Import-following collection that drops ignored files afterwards
        - Keeps generated and vendored files out of the output
        """
        return CollectorConfig(apply_ignore_filter=True)

    @staticmethod
    def python_project() -> CollectorConfig:
        """
        Optimized for Python codebases
        - Python seeds expanded in one out-of-process batch
        - Python project markers for root discovery
        """
        return CollectorConfig(
            python_batch=True,
            marker_files=['pyproject.toml', 'setup.py', 'setup.cfg'],
        )

    @staticmethod
    def minimal() -> CollectorConfig:
        """No default ignore patterns, no progress bars"""
        return CollectorConfig(ignore_patterns=[], show_progress=False)


def load_config(config_path: Union[str, Path]) -> CollectorConfig:
    """
    Load a collector configuration from a JSON file

    Args:
        config_path: Path to a JSON object whose keys are CollectorConfig fields

    Returns:
        Validated CollectorConfig
    """
    config_path = Path(config_path)
    try:
        data = json.loads(config_path.read_text(encoding='utf-8'))
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}", cause=e)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file {config_path} is not valid JSON", cause=e)

    config = CollectorConfig.from_dict(data)
    logger.info(f"Loaded configuration from {config_path}")
    return config
