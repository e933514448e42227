"""
Code collection modules.
"""

from .stages.traversal import ContextCollector
from .stages.filtering import IgnoreFilter
from .stages.formatting import ContextFormatter, format_contexts
from .workers.python_batch import PythonBatchExpander

__all__ = [
    'ContextCollector',
    'IgnoreFilter',
    'ContextFormatter',
    'format_contexts',
    'PythonBatchExpander',
]
