"""
Node-style module resolution for JavaScript / TypeScript imports.
"""

import logging
import os
from typing import List, Optional, Tuple

from base_classes import ImportResolver, ResolverConfig
from file_utils import normalize_path
from .tsconfig_loader import TsConfig, TsConfigCache

logger = logging.getLogger(__name__)

# Probe order for extensionless specifiers
PROBE_EXTENSIONS = [
    '.ts', '.tsx', '.js', '.jsx', '.mjs', '.cjs', '.es6', '.es',
    '.mts', '.cts', '.vue', '.svelte', '.astro', '.mdx',
]

# ESM sources often import the emitted .js name of a .ts file
TYPESCRIPT_TWINS = {
    '.js': ['.ts', '.tsx'],
    '.jsx': ['.tsx'],
    '.mjs': ['.mts'],
    '.cjs': ['.cts'],
}

EXCLUDED_DIRS = {'node_modules', 'bower_components', 'jspm_packages', 'vendor'}


def probe_module(base_path: str) -> Optional[str]:
    """Find the file a module path refers to.

    Tries the exact file, its TypeScript twin, each known extension and
    finally ``index.<ext>`` inside a directory of that name.
    """
    if os.path.isfile(base_path):
        return base_path

    stem, ext = os.path.splitext(base_path)
    for twin in TYPESCRIPT_TWINS.get(ext.lower(), []):
        if os.path.isfile(stem + twin):
            return stem + twin

    for ext in PROBE_EXTENSIONS:
        if os.path.isfile(base_path + ext):
            return base_path + ext

    if os.path.isdir(base_path):
        for ext in PROBE_EXTENSIONS:
            index_file = os.path.join(base_path, f"index{ext}")
            if os.path.isfile(index_file):
                return index_file

    return None


def is_excluded(file_path: str) -> bool:
    """True if the path runs through a dependency directory"""
    parts = file_path.replace('\\', '/').split('/')
    return any(part in EXCLUDED_DIRS for part in parts)


def match_alias(specifier: str, config: TsConfig) -> Optional[Tuple[str, List[str]]]:
    """Pick the most specific ``paths`` pattern matching the specifier.

    An exact pattern beats every wildcard. Wildcards are ranked by prefix
    length, then by segment count, then by declaration order. Returns the
    wildcard capture and the pattern's targets.
    """
    best = None
    best_rank = None

    for order, (pattern, targets) in enumerate(config.paths):
        if '*' not in pattern:
            if pattern == specifier:
                return '', targets
            continue

        prefix, suffix = pattern.split('*', 1)
        if len(specifier) < len(prefix) + len(suffix):
            continue
        if not (specifier.startswith(prefix) and specifier.endswith(suffix)):
            continue

        rank = (-len(prefix), -len(pattern.split('/')), order)
        if best_rank is None or rank < best_rank:
            capture = specifier[len(prefix):len(specifier) - len(suffix)]
            best = (capture, targets)
            best_rank = rank

    return best


class NodeResolver(ImportResolver):
    """Resolves relative specifiers and tsconfig path aliases to local files"""

    config = ResolverConfig(
        extensions=['.ts', '.tsx', '.js', '.jsx', '.mjs', '.cjs', '.mts', '.cts'],
        config_files=['package.json', 'tsconfig.json', 'jsconfig.json'],
    )

    def __init__(self, tsconfig_cache: Optional[TsConfigCache] = None):
        self.tsconfig_cache = tsconfig_cache or TsConfigCache()

    def resolve(self, specifier: str, importing_dir: str, project_root: str) -> Optional[str]:
        if not specifier:
            return None

        if specifier.startswith('.'):
            resolved = probe_module(os.path.join(importing_dir, specifier))
            return normalize_path(resolved) if resolved else None

        resolved = self._resolve_with_tsconfig(specifier, project_root)
        if resolved is None:
            return None
        resolved = normalize_path(resolved)
        if is_excluded(resolved):
            logger.debug(f"Ignoring {specifier} resolved into a dependency directory: {resolved}")
            return None
        return resolved

    def _resolve_with_tsconfig(self, specifier: str, project_root: str) -> Optional[str]:
        config = self.tsconfig_cache.get(project_root)
        if config is None:
            return None

        alias = match_alias(specifier, config) if config.paths else None
        if alias is not None:
            capture, targets = alias
            for target in targets:
                candidate = os.path.join(config.target_base, target.replace('*', capture, 1))
                resolved = probe_module(os.path.normpath(candidate))
                if resolved:
                    logger.debug(f"Resolved alias {specifier} -> {resolved}")
                    return resolved

        if config.base_url:
            return probe_module(os.path.join(config.base_url, specifier))

        return None
