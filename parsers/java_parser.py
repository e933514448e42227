"""
Java language import parser.
"""

import logging
import re
from typing import List

from base_classes import ImportInfo, ImportKind, LanguageParser, ParserConfig
from .base import ImportExtractorMixin, LineIndex, ParserMixin

logger = logging.getLogger(__name__)


class JavaParser(LanguageParser, ParserMixin, ImportExtractorMixin):
    """Java import parser working on comment-masked source."""

    config = ParserConfig(name="Java", extensions=[".java"])

    # Identifiers may be split by whitespace around the dots
    IMPORT_PATTERN = re.compile(
        r'^[ \t]*import\s+(?:static\s+)?'
        r'([A-Za-z_$][\w$]*(?:\s*\.\s*[A-Za-z_$][\w$]*)*(?:\s*\.\s*\*)?)\s*;',
        re.MULTILINE
    )

    def parse_imports(self, content: str, file_path: str) -> List[ImportInfo]:
        return self.parse_with_fallback(
            self._scan_imports,
            self.extract_jvm_style_imports,
            content,
            file_path,
        )

    def _scan_imports(self, content: str) -> List[ImportInfo]:
        masked, strings = self.mask_comments(content)
        lines = LineIndex(content)
        imports = []

        for match in self.IMPORT_PATTERN.finditer(masked):
            start = match.start(1)
            if self.in_spans(start, strings):
                continue
            module = re.sub(r'\s+', '', match.group(1))
            imports.append(ImportInfo(module=module, kind=ImportKind.IMPORT, line=lines.line_of(start)))

        logger.debug(f"Found {len(imports)} Java imports")
        return imports
