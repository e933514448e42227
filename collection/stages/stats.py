"""
Collection Statistics
=====================

Per file type breakdown of a collection and a token estimate of the
formatted output.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from base_classes import FileContext
from parsers.registry import ParserRegistry
from token_counter import TokenCounter, TokenStats

logger = logging.getLogger(__name__)

NO_EXTENSION = "no extension"

LANGUAGE_NAMES = {
    '.ts': 'TypeScript', '.tsx': 'TSX', '.mts': 'TypeScript', '.cts': 'TypeScript',
    '.js': 'JavaScript', '.jsx': 'JavaScript', '.mjs': 'JavaScript', '.cjs': 'JavaScript',
    '.vue': 'Vue', '.svelte': 'Svelte', '.astro': 'Astro', '.mdx': 'MDX',
    '.java': 'Java', '.kt': 'Kotlin', '.kts': 'Kotlin', '.gradle': 'Gradle',
    '.py': 'Python', '.pyi': 'Python',
    '.json': 'JSON', '.md': 'Markdown', '.yml': 'YAML', '.yaml': 'YAML', '.toml': 'TOML',
    '.xml': 'XML', '.html': 'HTML', '.css': 'CSS', '.scss': 'SCSS',
    '.sh': 'Shell', '.sql': 'SQL', '.txt': 'Text', '.go': 'Go', '.rs': 'Rust',
}


def get_file_type_stats(contexts: List[FileContext]) -> Dict[str, Dict[str, int]]:
    """Count files and lines per extension"""
    stats: Dict[str, Dict[str, int]] = {}
    for ctx in contexts:
        ext = os.path.splitext(ctx.path)[1] or NO_EXTENSION
        entry = stats.setdefault(ext, {'count': 0, 'lines': 0})
        entry['count'] += 1
        entry['lines'] += ctx.line_count
    return stats


def language_name(ext: str) -> str:
    if ext == NO_EXTENSION:
        return NO_EXTENSION
    return LANGUAGE_NAMES.get(ext.lower(), ext)


@dataclass
class CollectionStats:
    """Summary of one collection run"""
    file_count: int = 0
    total_lines: int = 0
    by_type: Dict[str, Dict[str, int]] = field(default_factory=dict)
    parsed_files: int = 0  # Files with an import parser
    plain_files: int = 0
    token_stats: Optional[TokenStats] = None

    @classmethod
    def from_contexts(cls,
                      contexts: List[FileContext],
                      parser_registry: Optional[ParserRegistry] = None,
                      output: Optional[str] = None,
                      token_counter: Optional[TokenCounter] = None) -> 'CollectionStats':
        stats = cls(
            file_count=len(contexts),
            total_lines=sum(ctx.line_count for ctx in contexts),
            by_type=get_file_type_stats(contexts),
        )
        if parser_registry is not None:
            stats.parsed_files = sum(1 for ctx in contexts if parser_registry.get_parser(ctx.path))
            stats.plain_files = stats.file_count - stats.parsed_files
        if output is not None and token_counter is not None:
            stats.token_stats = token_counter.count_tokens(output)
        return stats

    def sorted_types(self) -> List[Dict[str, Any]]:
        """Breakdown rows, most lines first"""
        rows = [
            {'extension': ext, 'language': language_name(ext), **entry}
            for ext, entry in self.by_type.items()
        ]
        return sorted(rows, key=lambda row: row['lines'], reverse=True)

    def summary_line(self, mode_label: Optional[str] = None) -> str:
        summary = f"Copied {self.file_count} files ({self.total_lines} lines)"
        return f"{summary} - {mode_label}" if mode_label else summary

    def format_breakdown(self) -> str:
        lines = []
        for row in self.sorted_types():
            label = NO_EXTENSION if row['extension'] == NO_EXTENSION else f"{row['language']} ({row['extension']})"
            lines.append(f"  {label}: {row['count']} files, {row['lines']} lines")
        if self.token_stats is not None:
            lines.append(f"  Tokens: {self.token_stats.total_tokens:,} ({self.token_stats.encoding_used})")
        return '\n'.join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'file_count': self.file_count,
            'total_lines': self.total_lines,
            'by_type': self.by_type,
            'parsed_files': self.parsed_files,
            'plain_files': self.plain_files,
            'tokens': self.token_stats.to_dict() if self.token_stats else None,
        }
