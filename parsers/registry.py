"""
Parser Registry
===============

Maps file extensions to import parsers. Parsers are consulted in
registration order and the first one claiming an extension wins.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from base_classes import LanguageParser

logger = logging.getLogger(__name__)


class ParserRegistry:
    """
    Ordered registry of language parsers.

    A file whose extension no parser claims is treated as opaque text:
    it can be collected but its imports are never followed.
    """

    def __init__(self, parsers: Optional[List[LanguageParser]] = None):
        self._parsers: List[LanguageParser] = []
        for parser in parsers or []:
            self.register(parser)

    def register(self, parser: LanguageParser):
        """Append a parser; earlier registrations keep precedence"""
        if not isinstance(parser, LanguageParser):
            raise TypeError(f"{type(parser).__name__} is not a LanguageParser")

        for ext in parser.config.extensions:
            existing = self.get_parser_for_extension(ext)
            if existing is not None:
                logger.debug(f"Extension {ext} already handled by {existing.config.name}")

        self._parsers.append(parser)
        logger.debug(f"Registered parser: {parser.config.name}")

    def get_parser_for_extension(self, extension: str) -> Optional[LanguageParser]:
        extension = extension.lower()
        for parser in self._parsers:
            if extension in parser.config.extensions:
                return parser
        return None

    def get_parser(self, file_path: str) -> Optional[LanguageParser]:
        """Get the parser for a file, or None if its imports are not parsed"""
        return self.get_parser_for_extension(Path(file_path).suffix)

    def supported_extensions(self) -> List[str]:
        """List all supported file extensions"""
        extensions: List[str] = []
        for parser in self._parsers:
            for ext in parser.config.extensions:
                if ext not in extensions:
                    extensions.append(ext)
        return extensions

    def list_parsers(self) -> List[LanguageParser]:
        return list(self._parsers)

    def get_stats(self) -> Dict[str, Any]:
        """Get registry statistics"""
        return {
            "total_parsers": len(self._parsers),
            "supported_extensions": len(self.supported_extensions()),
            "parsers": [
                {"name": parser.config.name, "extensions": list(parser.config.extensions)}
                for parser in self._parsers
            ],
        }


def create_default_parser_registry() -> ParserRegistry:
    """Build a registry holding the built-in parsers in their fixed order"""
    from .typescript_parser import TypeScriptParser
    from .java_parser import JavaParser
    from .kotlin_parser import KotlinParser
    from .python_parser import PythonParser

    return ParserRegistry([
        TypeScriptParser(),
        JavaParser(),
        KotlinParser(),
        PythonParser(),
    ])
