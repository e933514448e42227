"""
Ignore Filter
=============

gitignore-style pattern matching for collected files and walked
directories.
"""

import logging
import posixpath
from typing import Iterable, List

import pathspec

from base_classes import FileContext

logger = logging.getLogger(__name__)


class IgnoreFilter:
    """
    Compiled ignore patterns.

    A path is ignored when either its workspace-relative path or its
    basename matches one of the patterns.
    """

    def __init__(self, patterns: Iterable[str]):
        self.patterns: List[str] = [p for p in patterns if p and p.strip()]
        self.spec = pathspec.GitIgnoreSpec.from_lines(self.patterns)

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def is_ignored(self, relative_path: str) -> bool:
        """Check a file path relative to the workspace root"""
        if not self.patterns:
            return False
        relative_path = relative_path.replace('\\', '/')
        basename = posixpath.basename(relative_path.rstrip('/'))
        return self.spec.match_file(relative_path) or self.spec.match_file(basename)

    def is_ignored_dir(self, relative_dir: str) -> bool:
        """Check a directory; directory-only patterns (``build/``) apply"""
        if not self.patterns:
            return False
        relative_dir = relative_dir.replace('\\', '/').rstrip('/')
        if not relative_dir or relative_dir == '.':
            return False
        return self.is_ignored(relative_dir + '/')

    def filter_contexts(self, contexts: List[FileContext]) -> List[FileContext]:
        """Drop ignored contexts, keeping the order of the rest"""
        kept = [ctx for ctx in contexts if not self.is_ignored(ctx.relative_path)]
        dropped = len(contexts) - len(kept)
        if dropped:
            logger.info(f"Ignore filter removed {dropped} of {len(contexts)} files")
        return kept
