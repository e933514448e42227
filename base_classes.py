"""
Base Classes for Code Collector
===============================

Contains core data structures and abstract base classes shared by the
parsers, resolvers and the collection stages.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class FileContext:
    """One collected file"""
    path: str  # Absolute, normalized path (unique within one run)
    content: str
    relative_path: str  # Display path relative to the workspace root

    @property
    def line_count(self) -> int:
        return len(self.content.split('\n'))

    @property
    def extension(self) -> str:
        return Path(self.path).suffix.lower()


class ImportKind(Enum):
    """How an import was written in source"""
    IMPORT = "import"      # import ... from "x" / import a.b.C
    DYNAMIC = "dynamic"    # import("x")
    REQUIRE = "require"    # require("x")
    FROM = "from"          # from a.b import c


@dataclass
class ImportInfo:
    """A single parsed import statement"""
    module: str
    kind: ImportKind = ImportKind.IMPORT
    line: int = 1


@dataclass
class ParserConfig:
    """Static descriptor for a language parser"""
    name: str
    extensions: List[str] = field(default_factory=list)


@dataclass
class ResolverConfig:
    """Static descriptor for an import resolver"""
    extensions: List[str] = field(default_factory=list)
    config_files: List[str] = field(default_factory=list)  # Project marker files


def _extension_of(file_path: str) -> str:
    return Path(file_path).suffix.lower()


class LanguageParser(ABC):
    """Abstract base class for language-specific import parsers"""

    config: ParserConfig

    @abstractmethod
    def parse_imports(self, content: str, file_path: str) -> List[ImportInfo]:
        """Extract import declarations. Must never raise."""

    def can_handle(self, file_path: str) -> bool:
        return _extension_of(file_path) in self.config.extensions


class ImportResolver(ABC):
    """Abstract base class for language-specific import resolvers"""

    config: ResolverConfig

    @abstractmethod
    def resolve(self, specifier: str, importing_dir: str, project_root: str) -> Optional[str]:
        """Map an import specifier to a local file, or None if it is not local."""

    def can_handle(self, file_path: str) -> bool:
        return _extension_of(file_path) in self.config.extensions
