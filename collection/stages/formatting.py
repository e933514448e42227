"""
Output Formatter
================

Concatenate collected files into one text blob. Every file gets a header
naming its path and its line range within the concatenated sequence.
"""

import logging
from typing import Callable, Dict, List

from base_classes import FileContext

logger = logging.getLogger(__name__)

# Fence languages for the markdown layout
MARKDOWN_LANGUAGES = {
    '.ts': 'typescript', '.tsx': 'tsx', '.mts': 'typescript', '.cts': 'typescript',
    '.js': 'javascript', '.jsx': 'jsx', '.mjs': 'javascript', '.cjs': 'javascript',
    '.java': 'java', '.kt': 'kotlin', '.kts': 'kotlin',
    '.py': 'python', '.pyi': 'python',
    '.json': 'json', '.md': 'markdown', '.yml': 'yaml', '.yaml': 'yaml',
    '.xml': 'xml', '.html': 'html', '.css': 'css', '.sh': 'bash', '.toml': 'toml',
    '.gradle': 'groovy', '.sql': 'sql', '.go': 'go', '.rs': 'rust',
}


def line_ranges(contexts: List[FileContext]) -> List[range]:
    """Cumulative 1-based line ranges, one per context"""
    ranges = []
    start = 1
    for ctx in contexts:
        end = start + ctx.line_count - 1
        ranges.append(range(start, end + 1))
        start = end + 1
    return ranges


def format_contexts(contexts: List[FileContext]) -> str:
    """Plain layout: ``// path (Lstart-Lend)`` header before each file"""
    parts = []
    for ctx, lines in zip(contexts, line_ranges(contexts)):
        parts.append(f"\n// {ctx.relative_path} (L{lines.start}-L{lines.stop - 1})\n{ctx.content}\n")
    return ''.join(parts)


class ContextFormatter:
    """Format collected files in one of the supported layouts"""

    def __init__(self):
        self.format_templates: Dict[str, Callable[[List[FileContext]], str]] = {
            'plain': format_contexts,
            'markdown': self._format_markdown,
        }

    @property
    def formats(self) -> List[str]:
        return list(self.format_templates)

    def format(self, contexts: List[FileContext], format_type: str = 'plain') -> str:
        if format_type not in self.format_templates:
            raise ValueError(f"Unknown output format: {format_type}")
        output = self.format_templates[format_type](contexts)
        logger.debug(f"Formatted {len(contexts)} files as {format_type} ({len(output)} chars)")
        return output

    @staticmethod
    def _format_markdown(contexts: List[FileContext]) -> str:
        parts = []
        for ctx, lines in zip(contexts, line_ranges(contexts)):
            language = MARKDOWN_LANGUAGES.get(ctx.extension, '')
            # Longer fence than any backtick run inside the file
            fence = '```'
            while fence in ctx.content:
                fence += '`'
            parts.append(
                f"### {ctx.relative_path} (L{lines.start}-L{lines.stop - 1})\n\n"
                f"{fence}{language}\n{ctx.content}\n{fence}\n"
            )
        return '\n'.join(parts)
