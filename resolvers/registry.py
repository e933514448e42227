"""
Resolver Registry
=================

Maps file extensions to import resolvers, first registration wins.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from base_classes import ImportResolver
from parsers.registry import ParserRegistry, create_default_parser_registry

logger = logging.getLogger(__name__)


class ResolverRegistry:
    """Ordered registry of import resolvers"""

    def __init__(self, resolvers: Optional[List[ImportResolver]] = None):
        self._resolvers: List[ImportResolver] = []
        for resolver in resolvers or []:
            self.register(resolver)

    def register(self, resolver: ImportResolver):
        if not isinstance(resolver, ImportResolver):
            raise TypeError(f"{type(resolver).__name__} is not an ImportResolver")
        self._resolvers.append(resolver)
        logger.debug(f"Registered resolver: {type(resolver).__name__}")

    def get_resolver_for_extension(self, extension: str) -> Optional[ImportResolver]:
        extension = extension.lower()
        for resolver in self._resolvers:
            if extension in resolver.config.extensions:
                return resolver
        return None

    def get_resolver(self, file_path: str) -> Optional[ImportResolver]:
        return self.get_resolver_for_extension(Path(file_path).suffix)

    def supported_extensions(self) -> List[str]:
        extensions: List[str] = []
        for resolver in self._resolvers:
            for ext in resolver.config.extensions:
                if ext not in extensions:
                    extensions.append(ext)
        return extensions

    def marker_files(self) -> List[str]:
        """Project marker files of every resolver, in registration order"""
        markers: List[str] = []
        for resolver in self._resolvers:
            for marker in resolver.config.config_files:
                if marker not in markers:
                    markers.append(marker)
        return markers

    def list_resolvers(self) -> List[ImportResolver]:
        return list(self._resolvers)

    def get_stats(self) -> Dict[str, Any]:
        """Get registry statistics"""
        return {
            "total_resolvers": len(self._resolvers),
            "supported_extensions": len(self.supported_extensions()),
            "resolvers": [
                {
                    "name": type(resolver).__name__,
                    "extensions": list(resolver.config.extensions),
                    "config_files": list(resolver.config.config_files),
                }
                for resolver in self.list_resolvers()
            ],
        }


def create_default_resolver_registry() -> ResolverRegistry:
    """Build a registry holding fresh built-in resolvers in their fixed order"""
    from .node_resolver import NodeResolver
    from .jvm_resolver import JvmResolver
    from .python_resolver import PythonResolver

    return ResolverRegistry([
        NodeResolver(),
        JvmResolver(),
        PythonResolver(),
    ])


def create_default_registries() -> Tuple[ParserRegistry, ResolverRegistry]:
    """Fresh parser and resolver registries with the built-in languages"""
    return create_default_parser_registry(), create_default_resolver_registry()
