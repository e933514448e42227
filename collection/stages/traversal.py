"""
Context Collector
=================

Builds the ordered set of files reachable from a seed list by following
local imports. Files are visited depth-first in the order a recursive
descent would visit them, each file at most once per run.
"""

import logging
import os
from typing import Callable, Dict, List, Optional, Set

from tqdm import tqdm

from base_classes import FileContext
from collector_configs import CollectorConfig
from collection_errors import BatchExpansionError
from file_utils import (ProjectRootFinder, display_path, is_text_file, iter_text_files,
                        normalize_path, read_text_file)
from parsers.registry import ParserRegistry, create_default_parser_registry
from resolvers.registry import ResolverRegistry, create_default_resolver_registry
from .filtering import IgnoreFilter
from ..workers.python_batch import PythonBatchExpander

logger = logging.getLogger(__name__)

PYTHON_EXTENSIONS = ('.py', '.pyi')


class _Run:
    """State owned by a single collection call"""

    def __init__(self, workspace_root: str, cancel_event, progress: tqdm):
        self.workspace_root = workspace_root
        self.cancel_event = cancel_event
        self.progress = progress
        self.contexts: List[FileContext] = []
        self.processed: Set[str] = set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()


class ContextCollector:
    """
    Import-following file collector.

    Args:
        parser_registry: Parsers deciding which files have followable imports
        resolver_registry: Resolvers mapping specifiers to local files
        config: Collector settings (batch mode, ignore patterns, progress)
        project_root_finder: Maps a file to the root of the project it belongs
            to; defaults to a marker-file search bounded by the workspace root
        batch_expander: Out-of-process expander used for Python seeds in batch mode
    """

    def __init__(self,
                 parser_registry: Optional[ParserRegistry] = None,
                 resolver_registry: Optional[ResolverRegistry] = None,
                 config: Optional[CollectorConfig] = None,
                 project_root_finder: Optional[Callable[[str], str]] = None,
                 batch_expander: Optional[PythonBatchExpander] = None):
        self.parser_registry = parser_registry or create_default_parser_registry()
        self.resolver_registry = resolver_registry or create_default_resolver_registry()
        self.config = config or CollectorConfig()
        self.project_root_finder = project_root_finder
        self.batch_expander = batch_expander or PythonBatchExpander(timeout=self.config.batch_timeout)
        self._root_finders: Dict[str, ProjectRootFinder] = {}

    def _finder_for(self, workspace_root: str) -> Callable[[str], str]:
        if self.project_root_finder is not None:
            return self.project_root_finder
        if workspace_root not in self._root_finders:
            markers = self.resolver_registry.marker_files() + self.config.marker_files
            self._root_finders[workspace_root] = ProjectRootFinder(markers, boundary=workspace_root)
        return self._root_finders[workspace_root]

    def _progress(self, desc: str, total: Optional[int] = None) -> tqdm:
        return tqdm(total=total, desc=desc, unit="files", disable=not self.config.show_progress)

    # -- public operations -------------------------------------------------

    def collect(self, seed_paths: List[str], project_root: str, cancel_event=None) -> List[FileContext]:
        """
        Collect the seeds and every local file they import, transitively.

        Directory seeds contribute all of their text files without import
        following. Missing and unreadable files are logged and skipped; a
        cancelled run returns what was collected so far.
        """
        if not seed_paths:
            raise ValueError("collect() needs at least one seed path")

        workspace_root = normalize_path(project_root)
        finder = self._finder_for(workspace_root)
        deferred_python: List[str] = []

        with self._progress("Following imports") as progress:
            run = _Run(workspace_root, cancel_event, progress)
            logger.info(f"Processing {len(seed_paths)} initial paths for imports...")

            for seed in seed_paths:
                if run.cancelled:
                    break
                seed = normalize_path(seed)
                if os.path.isdir(seed):
                    self._collect_directory(seed, run)
                elif os.path.isfile(seed) and not is_text_file(seed):
                    logger.info(f"Skipping binary file: {seed}")
                elif self.config.python_batch and seed.endswith(PYTHON_EXTENSIONS):
                    deferred_python.append(seed)
                else:
                    self._follow_imports(seed, run, finder)

            if deferred_python and not run.cancelled:
                self._expand_python_batch(deferred_python, run, finder)

        if run.cancelled:
            logger.warning(f"Collection cancelled after {len(run.contexts)} files")
        logger.info(f"Collected {len(run.contexts)} files from {len(seed_paths)} seeds")
        return run.contexts

    def collect_direct(self, seed_paths: List[str], project_root: str, cancel_event=None) -> List[FileContext]:
        """Collect exactly the given files (and directory contents), no import following"""
        if not seed_paths:
            raise ValueError("collect_direct() needs at least one seed path")

        with self._progress("Collecting files") as progress:
            run = _Run(normalize_path(project_root), cancel_event, progress)
            for seed in seed_paths:
                if run.cancelled:
                    break
                seed = normalize_path(seed)
                if os.path.isdir(seed):
                    self._collect_directory(seed, run)
                elif not os.path.exists(seed):
                    logger.warning(f"File not found: {seed}")
                elif is_text_file(seed):
                    self._record(seed, run)
                else:
                    logger.info(f"Skipping binary file: {seed}")

        logger.info(f"Collected {len(run.contexts)} files directly")
        return run.contexts

    def collect_all(self,
                    target_dirs: List[str],
                    project_root: str,
                    ignore_patterns: Optional[List[str]] = None,
                    cancel_event=None) -> List[FileContext]:
        """
        Collect every text file below the targets that no ignore pattern matches.

        Ignored directories are pruned during the walk. Overlapping targets
        contribute each file once.
        """
        workspace_root = normalize_path(project_root)
        if ignore_patterns is None:
            ignore_patterns = self.config.effective_ignore_patterns
        ignore = IgnoreFilter(ignore_patterns)

        def relative(path: str) -> str:
            return display_path(path, workspace_root)

        files: List[str] = []
        seen: Set[str] = set()
        for target in target_dirs or [workspace_root]:
            target = normalize_path(target)
            if not os.path.isdir(target):
                logger.warning(f"Not a directory: {target}")
                continue
            for file_path in iter_text_files(
                    target,
                    skip_dir=lambda d: ignore.is_ignored_dir(relative(d)),
                    skip_file=lambda f: ignore.is_ignored(relative(f))):
                file_path = normalize_path(file_path)
                if file_path not in seen:
                    seen.add(file_path)
                    files.append(file_path)
            if cancel_event is not None and cancel_event.is_set():
                break

        logger.info(f"Found {len(files)} files to collect")

        with self._progress("Collecting files", total=len(files)) as progress:
            run = _Run(workspace_root, cancel_event, progress)
            for file_path in files:
                if run.cancelled:
                    logger.warning(f"Collection cancelled after {len(run.contexts)} files")
                    break
                self._record(file_path, run)

        return run.contexts

    # -- traversal ----------------------------------------------------------

    def _record(self, file_path: str, run: _Run) -> bool:
        """Mark a file processed and append its context. False if skipped."""
        if file_path in run.processed:
            return False
        run.processed.add(file_path)

        try:
            content = read_text_file(file_path)
        except OSError as e:
            logger.error(f"Failed to read file {file_path}: {e}")
            return False

        run.contexts.append(FileContext(
            path=file_path,
            content=content,
            relative_path=display_path(file_path, run.workspace_root),
        ))
        run.progress.update(1)
        return True

    def _collect_directory(self, directory: str, run: _Run):
        logger.debug(f"Including every text file below {directory}")
        for file_path in iter_text_files(directory):
            if run.cancelled:
                return
            self._record(normalize_path(file_path), run)

    def _follow_imports(self, seed: str, run: _Run, finder: Callable[[str], str]):
        stack = [seed]
        while stack:
            if run.cancelled:
                return
            file_path = normalize_path(stack.pop())

            if file_path in run.processed:
                continue
            if not os.path.isfile(file_path):
                logger.warning(f"File not found: {file_path}")
                continue
            if not self._record(file_path, run):
                continue

            children = self._discover_imports(run.contexts[-1], run, finder)
            # Reversed so the first import is visited first
            stack.extend(reversed(children))

    def _discover_imports(self, ctx: FileContext, run: _Run, finder: Callable[[str], str]) -> List[str]:
        parser = self.parser_registry.get_parser(ctx.path)
        resolver = self.resolver_registry.get_resolver(ctx.path)
        if parser is None or resolver is None:
            return []

        imports = parser.parse_imports(ctx.content, ctx.path)
        if not imports:
            return []

        importing_dir = os.path.dirname(ctx.path)
        file_root = finder(ctx.path)
        children = []

        for info in imports:
            if run.cancelled:
                break
            try:
                resolved = resolver.resolve(info.module, importing_dir, file_root)
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to resolve '{info.module}' from {ctx.relative_path}: {e}")
                continue
            if resolved is None:
                continue
            if self.parser_registry.get_parser(resolved) is None:
                logger.debug(f"Not following {info.module} -> {resolved}: no parser for its type")
                continue
            children.append(resolved)

        logger.debug(f"{ctx.relative_path}: {len(imports)} imports, {len(children)} local")
        return children

    def _expand_python_batch(self, seeds: List[str], run: _Run, finder: Callable[[str], str]):
        """Expand deferred Python seeds, one helper call per project root"""
        groups: Dict[str, List[str]] = {}
        for seed in seeds:
            if os.path.isfile(seed):
                groups.setdefault(finder(seed), []).append(seed)
            else:
                logger.warning(f"File not found: {seed}")

        for root, group in groups.items():
            if run.cancelled:
                return
            try:
                files = self.batch_expander.resolve_all_imports_batch(
                    group, self.config.effective_ignore_patterns, project_root=root)
            except BatchExpansionError as e:
                logger.warning(f"Python batch expansion failed, including seed files only: {e}")
                files = group

            for file_path in files:
                if run.cancelled:
                    return
                file_path = normalize_path(file_path)
                if file_path in run.processed:
                    continue
                if not os.path.isfile(file_path):
                    logger.warning(f"File not found: {file_path}")
                    continue
                self._record(file_path, run)
