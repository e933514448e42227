"""
Kotlin language import parser.

Kotlin imports must precede all declarations, so only the file header is
scanned: blank lines, comments, annotations and the package directive are
skipped and the scan ends at the first other line.
"""

import logging
import re
from typing import List, Optional

from base_classes import ImportInfo, ImportKind, LanguageParser, ParserConfig
from .base import ImportExtractorMixin, ParserMixin

logger = logging.getLogger(__name__)


class KotlinParser(LanguageParser, ParserMixin, ImportExtractorMixin):
    """Kotlin header scanner for import directives."""

    config = ParserConfig(name="Kotlin", extensions=[".kt", ".kts"])

    IMPORT_PATTERN = re.compile(
        r'^import\s+([A-Za-z_][\w]*(?:\.[A-Za-z_][\w]*)*(?:\.\*)?)'
        r'(?:\s+as\s+[A-Za-z_]\w*)?\s*;?\s*(?://.*)?$'
    )
    # Backticked names (import a.`when`.B) are written without the ticks
    BACKTICK = re.compile(r'`([^`]+)`')

    def parse_imports(self, content: str, file_path: str) -> List[ImportInfo]:
        return self.parse_with_fallback(
            self._scan_header,
            self.extract_jvm_style_imports,
            content,
            file_path,
        )

    def _scan_header(self, content: str) -> List[ImportInfo]:
        imports = []
        in_block_comment = False

        for index, raw_line in enumerate(content.split('\n')):
            line = raw_line.strip()

            if in_block_comment:
                if '*/' in line:
                    in_block_comment = False
                    line = line.split('*/', 1)[1].strip()
                    if not line:
                        continue
                else:
                    continue

            if not line or line.startswith('//') or line.startswith('#!'):
                continue
            if line.startswith('/*'):
                if '*/' not in line[2:]:
                    in_block_comment = True
                continue
            if line.startswith('@'):
                continue  # File annotations such as @file:JvmName("Utils")
            if line.startswith('package ') or line == 'package':
                continue

            if line.startswith('import '):
                info = self._parse_import_line(line, index + 1)
                if info:
                    imports.append(info)
                continue

            break

        return imports

    def _parse_import_line(self, line: str, line_number: int) -> Optional[ImportInfo]:
        match = self.IMPORT_PATTERN.match(self.BACKTICK.sub(r'\1', line))
        if not match:
            logger.debug(f"Skipping malformed Kotlin import on line {line_number}: {line}")
            return None
        return ImportInfo(module=match.group(1), kind=ImportKind.IMPORT, line=line_number)
