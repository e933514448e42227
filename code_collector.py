"""
Code Collector
==============

High-level entry point tying together traversal, filtering, formatting and
statistics. Each gather method returns a CollectionResult holding the
collected files, the formatted text and a summary.
"""

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from base_classes import FileContext
from collector_configs import CollectorConfig
from collection_errors import NoFilesCollectedError
from collection.stages.filtering import IgnoreFilter
from collection.stages.formatting import ContextFormatter
from collection.stages.stats import CollectionStats
from collection.stages.traversal import ContextCollector
from file_utils import GENERIC_PROJECT_MARKERS, find_project_root, normalize_path
from resolvers.registry import create_default_registries
from token_counter import TokenCounter

logger = logging.getLogger(__name__)

MODE_IMPORTS = "imports"
MODE_SMART = "smart filter"
MODE_DIRECT = "direct"
MODE_ALL = "all"


@dataclass
class CollectionResult:
    """Outcome of one collection run"""
    contexts: List[FileContext]
    output: str
    stats: CollectionStats
    mode: str

    @property
    def mode_label(self) -> str:
        if self.mode == MODE_IMPORTS:
            return f"{self.stats.parsed_files} with imports, {self.stats.plain_files} text"
        return self.mode

    @property
    def summary(self) -> str:
        return self.stats.summary_line(self.mode_label)


class CodeCollector:
    """
    Collect source files into a single text blob.

    Args:
        config: Collector settings, defaults to ConfigPresets.default()
        workspace_root: Root that display paths are relative to. When omitted
            it is derived from the paths of each call.
        count_tokens: Add a token estimate of the output to the statistics
    """

    def __init__(self,
                 config: Optional[CollectorConfig] = None,
                 workspace_root: Optional[str] = None,
                 count_tokens: bool = False):
        self.config = config or CollectorConfig()
        self.workspace_root = normalize_path(workspace_root) if workspace_root else None
        self.parser_registry, self.resolver_registry = create_default_registries()
        self.collector = ContextCollector(
            parser_registry=self.parser_registry,
            resolver_registry=self.resolver_registry,
            config=self.config,
        )
        self.formatter = ContextFormatter()
        self.ignore_filter = IgnoreFilter(self.config.effective_ignore_patterns)
        self.token_counter = TokenCounter(self.config.token_model) if count_tokens else None

    def resolve_workspace_root(self, paths: List[str]) -> str:
        """Explicit workspace root, else the nearest project root shared by all paths"""
        if self.workspace_root:
            return self.workspace_root

        anchors = []
        for path in paths:
            path = normalize_path(path)
            anchors.append(path if os.path.isdir(path) else os.path.dirname(path))
        try:
            common = os.path.commonpath(anchors) if anchors else os.getcwd()
        except ValueError:
            # Paths on different drives
            common = anchors[0]

        markers = GENERIC_PROJECT_MARKERS + self.resolver_registry.marker_files() + self.config.marker_files
        return find_project_root(common, markers)

    def gather_imports(self, paths: List[str], cancel_event=None) -> CollectionResult:
        """Seeds plus every local file reachable through their imports"""
        root = self.resolve_workspace_root(paths)
        contexts = self.collector.collect(paths, root, cancel_event=cancel_event)
        if self.config.apply_ignore_filter:
            contexts = self.ignore_filter.filter_contexts(contexts)
            return self._finish(paths, contexts, MODE_SMART, cancel_event)
        return self._finish(paths, contexts, MODE_IMPORTS, cancel_event)

    def gather_smart(self, paths: List[str], cancel_event=None) -> CollectionResult:
        """Like gather_imports, then drop files matching the ignore patterns"""
        root = self.resolve_workspace_root(paths)
        contexts = self.collector.collect(paths, root, cancel_event=cancel_event)
        contexts = self.ignore_filter.filter_contexts(contexts)
        return self._finish(paths, contexts, MODE_SMART, cancel_event)

    def gather_direct(self, paths: List[str], cancel_event=None) -> CollectionResult:
        """Exactly the given files and directory contents"""
        root = self.resolve_workspace_root(paths)
        contexts = self.collector.collect_direct(paths, root, cancel_event=cancel_event)
        return self._finish(paths, contexts, MODE_DIRECT, cancel_event)

    def collect_all(self, targets: Optional[List[str]] = None, cancel_event=None) -> CollectionResult:
        """Every non-ignored text file below the targets (default: workspace root)"""
        if targets:
            root = self.resolve_workspace_root(targets)
        else:
            root = self.workspace_root or normalize_path(os.getcwd())
            targets = [root]
        contexts = self.collector.collect_all(
            targets, root, self.config.effective_ignore_patterns, cancel_event=cancel_event)
        return self._finish(targets, contexts, MODE_ALL, cancel_event)

    def _finish(self, seeds: List[str], contexts: List[FileContext], mode: str,
                cancel_event=None) -> CollectionResult:
        cancelled = cancel_event is not None and cancel_event.is_set()
        if not contexts and not cancelled:
            raise NoFilesCollectedError(seeds, mode=mode)

        output = self.formatter.format(contexts, self.config.output_format)
        stats = CollectionStats.from_contexts(
            contexts,
            parser_registry=self.parser_registry,
            output=output,
            token_counter=self.token_counter,
        )
        result = CollectionResult(contexts=contexts, output=output, stats=stats, mode=mode)
        logger.info(result.summary)
        return result
