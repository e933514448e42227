"""
Worker components that run outside the main traversal.
"""

from .python_batch import PythonBatchExpander

__all__ = [
    'PythonBatchExpander',
]
