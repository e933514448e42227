"""
Import parsers for the code collector.

Each parser extracts the import declarations of one language family.
Use create_default_parser_registry() to get all of them in lookup order.
"""

from .base import ParserMixin, ImportExtractorMixin, LineIndex
from .registry import ParserRegistry, create_default_parser_registry

from .typescript_parser import TypeScriptParser
from .java_parser import JavaParser
from .kotlin_parser import KotlinParser
from .python_parser import PythonParser

__all__ = [
    # Parser mixins
    'ParserMixin',
    'ImportExtractorMixin',
    'LineIndex',

    # Registry
    'ParserRegistry',
    'create_default_parser_registry',

    # Individual parsers
    'TypeScriptParser',
    'JavaParser',
    'KotlinParser',
    'PythonParser',
]
