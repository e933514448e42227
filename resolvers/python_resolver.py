"""
Python import resolution against the local source tree.
"""

import logging
import os
from typing import List, Optional

from base_classes import ImportResolver, ResolverConfig
from file_utils import is_within, normalize_path

logger = logging.getLogger(__name__)


def find_module(base_dir: str, parts: List[str]) -> Optional[str]:
    """``base/a/b.py`` first, then the package ``base/a/b/__init__.py``"""
    module_path = os.path.join(base_dir, *parts)
    for candidate in (module_path + '.py', os.path.join(module_path, '__init__.py')):
        if os.path.isfile(candidate):
            return normalize_path(candidate)
    return None


class PythonResolver(ImportResolver):
    """Resolves relative and absolute Python imports to local modules"""

    config = ResolverConfig(
        extensions=['.py', '.pyi'],
        config_files=['pyproject.toml', 'setup.py', 'setup.cfg', 'requirements.txt'],
    )

    def resolve(self, specifier: str, importing_dir: str, project_root: str) -> Optional[str]:
        if not specifier:
            return None
        if specifier.startswith('.'):
            return self._resolve_relative(specifier, importing_dir)
        return self._resolve_absolute(specifier, importing_dir, project_root)

    @staticmethod
    def _resolve_relative(specifier: str, importing_dir: str) -> Optional[str]:
        """One dot is the importing package, each further dot its parent"""
        level = len(specifier) - len(specifier.lstrip('.'))
        base_dir = importing_dir
        for _ in range(level - 1):
            base_dir = os.path.dirname(base_dir)

        parts = [p for p in specifier[level:].split('.') if p]
        if not parts:
            return None
        return find_module(base_dir, parts)

    @staticmethod
    def _resolve_absolute(specifier: str, importing_dir: str, project_root: str) -> Optional[str]:
        parts = [p for p in specifier.split('.') if p]
        if not parts:
            return None

        root = normalize_path(project_root)
        search_dir = normalize_path(importing_dir)
        if not is_within(search_dir, root):
            # Outside the project: only the importing directory itself
            return find_module(search_dir, parts)

        while True:
            resolved = find_module(search_dir, parts)
            if resolved:
                return resolved
            if search_dir == root:
                break
            search_dir = os.path.dirname(search_dir)

        # src layout
        return find_module(os.path.join(root, 'src'), parts)
