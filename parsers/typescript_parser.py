"""
TypeScript / JavaScript Import Parser
=====================================

Structural scan of JS/TS sources for static imports, dynamic import()
calls and require() calls. Comments are masked first so commented-out
imports are ignored; matches that start inside a string literal are
dropped. Only literal specifiers are reported.
"""

import logging
import re
from typing import List

from base_classes import ImportInfo, ImportKind, LanguageParser, ParserConfig
from .base import ImportExtractorMixin, LineIndex, ParserMixin

logger = logging.getLogger(__name__)

_NOT_MEMBER = r'(?<![\w$.])'

# import x from 'm' / import {a, b} from 'm' / import * as ns from 'm' / import 'm'
STATIC_IMPORT = re.compile(
    _NOT_MEMBER + r'import\b\s*(?:type\s+)?(?:[\w$*{}\s,]+?\s*\bfrom\s*)?([\'"])([^\'"\n]+)\1'
)
# export * from 'm' / export {a} from 'm'
EXPORT_FROM = re.compile(
    _NOT_MEMBER + r'export\b\s*(?:type\s+)?(?:\*\s*(?:as\s+[\w$]+\s*)?|\{[^}]*\}\s*)from\s*([\'"])([^\'"\n]+)\1'
)
# import('m'), import(`m`)
DYNAMIC_IMPORT = re.compile(_NOT_MEMBER + r'import\s*\(\s*([\'"`])([^\'"`\n]*)\1\s*[,)]')
# require('m')
REQUIRE_CALL = re.compile(_NOT_MEMBER + r'require\s*\(\s*([\'"`])([^\'"`\n]*)\1\s*\)')


class TypeScriptParser(LanguageParser, ParserMixin, ImportExtractorMixin):
    """Import parser for the TypeScript/JavaScript family"""

    config = ParserConfig(
        name="TypeScript/JavaScript",
        extensions=[".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".mts", ".cts"],
    )

    def parse_imports(self, content: str, file_path: str) -> List[ImportInfo]:
        return self.parse_with_fallback(
            self._scan_imports,
            self.extract_javascript_style_imports,
            content,
            file_path,
        )

    def _scan_imports(self, content: str) -> List[ImportInfo]:
        masked, strings = self.mask_comments(content, template_literals=True)
        lines = LineIndex(content)
        found = []

        for pattern, kind in ((STATIC_IMPORT, ImportKind.IMPORT),
                              (EXPORT_FROM, ImportKind.IMPORT),
                              (DYNAMIC_IMPORT, ImportKind.DYNAMIC),
                              (REQUIRE_CALL, ImportKind.REQUIRE)):
            for match in pattern.finditer(masked):
                start = match.start()
                if self.in_spans(start, strings):
                    continue
                specifier = match.group(2)
                if match.group(1) == '`' and '${' in specifier:
                    continue  # Computed specifier
                if not specifier:
                    continue
                found.append((start, ImportInfo(module=specifier, kind=kind, line=lines.line_of(start))))

        found.sort(key=lambda item: item[0])
        return [info for _, info in found]
