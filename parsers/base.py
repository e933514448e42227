"""
Base parser mixins and utilities for import parsers.
"""

import bisect
import logging
import re
from typing import Callable, List, Tuple

from base_classes import ImportInfo, ImportKind

logger = logging.getLogger(__name__)

Span = Tuple[int, int]


class ParserMixin:
    """Common parser utilities shared across all import parsers."""

    @staticmethod
    def parse_with_fallback(primary: Callable[[str], List[ImportInfo]],
                            fallback: Callable[[str], List[ImportInfo]],
                            content: str,
                            file_path: str) -> List[ImportInfo]:
        """Run the primary scan, degrading to the fallback scan on any error."""
        try:
            return primary(content)
        except Exception as e:
            logger.warning(f"Import scan failed for {file_path}, using line fallback: {e}")

        try:
            return fallback(content)
        except Exception as e:
            logger.error(f"Fallback import scan failed for {file_path}: {e}")
            return []

    @staticmethod
    def mask_comments(content: str, template_literals: bool = False) -> Tuple[str, List[Span]]:
        """Blank out // and /* */ comments in C-like source.

        Comment characters become spaces and newlines are kept, so offsets
        and line numbers in the masked text match the original. Also returns
        the (start, end) spans of string literals found along the way.
        """
        out = list(content)
        strings: List[Span] = []
        quotes = ('"', "'", '`') if template_literals else ('"', "'")
        i = 0
        n = len(content)

        while i < n:
            ch = content[i]
            nxt = content[i + 1] if i + 1 < n else ''

            if ch == '/' and nxt == '/':
                end = content.find('\n', i)
                end = n if end == -1 else end
                for j in range(i, end):
                    out[j] = ' '
                i = end
            elif ch == '/' and nxt == '*':
                end = content.find('*/', i + 2)
                end = n if end == -1 else end + 2
                for j in range(i, end):
                    if content[j] != '\n':
                        out[j] = ' '
                i = end
            elif ch in quotes:
                start = i
                i += 1
                while i < n and content[i] != ch:
                    if content[i] == '\\':
                        i += 1
                    elif content[i] == '\n' and ch != '`':
                        break  # Unterminated literal
                    i += 1
                i += 1
                strings.append((start, min(i, n)))
            else:
                i += 1

        return ''.join(out), strings

    @staticmethod
    def in_spans(offset: int, spans: List[Span]) -> bool:
        """True if offset falls inside one of the sorted spans."""
        index = bisect.bisect_right(spans, (offset, float('inf'))) - 1
        return index >= 0 and spans[index][0] <= offset < spans[index][1]


class LineIndex:
    """Maps character offsets to 1-based line numbers."""

    def __init__(self, content: str):
        self._starts = [0] + [m.end() for m in re.finditer('\n', content)]

    def line_of(self, offset: int) -> int:
        return bisect.bisect_right(self._starts, offset)


class ImportExtractorMixin:
    """Common line-based import extraction patterns."""

    JS_LINE_PATTERNS = [
        # import ... from 'module'
        (re.compile(r'^\s*import\s.*?\bfrom\s*[\'"]([^\'"]+)[\'"]'), ImportKind.IMPORT),
        # import 'module'
        (re.compile(r'^\s*import\s*[\'"]([^\'"]+)[\'"]'), ImportKind.IMPORT),
        # import('module')
        (re.compile(r'\bimport\s*\(\s*[\'"]([^\'"]+)[\'"]\s*\)'), ImportKind.DYNAMIC),
        # require('module')
        (re.compile(r'\brequire\s*\(\s*[\'"]([^\'"]+)[\'"]\s*\)'), ImportKind.REQUIRE),
    ]

    JVM_LINE_PATTERN = re.compile(
        r'^\s*import\s+(?:static\s+)?'
        r'([A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*(?:\.\*)?)\s*;?'
    )

    @classmethod
    def extract_javascript_style_imports(cls, content: str) -> List[ImportInfo]:
        """Extract JavaScript/TypeScript imports one line at a time."""
        imports = []
        for index, line in enumerate(content.split('\n')):
            for pattern, kind in cls.JS_LINE_PATTERNS:
                for match in pattern.finditer(line):
                    imports.append(ImportInfo(module=match.group(1), kind=kind, line=index + 1))
        return imports

    @classmethod
    def extract_jvm_style_imports(cls, content: str) -> List[ImportInfo]:
        """Extract Java/Kotlin style imports one line at a time."""
        imports = []
        for index, line in enumerate(content.split('\n')):
            match = cls.JVM_LINE_PATTERN.match(line)
            if match:
                imports.append(ImportInfo(module=match.group(1), kind=ImportKind.IMPORT, line=index + 1))
        return imports

    @staticmethod
    def extract_python_style_imports(content: str) -> List[ImportInfo]:
        """Extract Python-style imports (import X, from X import Y) anywhere in the file."""
        imports = []
        import_pattern = re.compile(r'^\s*(?:from\s+(\.*[\w.]*)\s+)?import\s+(.+)$')

        for index, line in enumerate(content.split('\n')):
            match = import_pattern.match(line)
            if not match:
                continue
            from_module = match.group(1)
            if from_module:
                imports.append(ImportInfo(module=from_module, kind=ImportKind.FROM, line=index + 1))
            else:
                for name in match.group(2).split(','):
                    name = name.strip()
                    if name:
                        imports.append(ImportInfo(module=name.split()[0], kind=ImportKind.IMPORT,
                                                  line=index + 1))
        return imports
