"""
Collection stages: traversal, filtering, formatting and statistics.
"""

from .traversal import ContextCollector
from .filtering import IgnoreFilter
from .formatting import ContextFormatter, format_contexts
from .stats import CollectionStats, get_file_type_stats

__all__ = [
    'ContextCollector',
    'IgnoreFilter',
    'ContextFormatter',
    'format_contexts',
    'CollectionStats',
    'get_file_type_stats',
]
