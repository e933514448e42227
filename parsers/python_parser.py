"""
Python language import parser.

Imports are read from the top of the module. The scan steps over comments,
docstrings, decorators and the usual guard blocks around imports
(try/except, ``if TYPE_CHECKING:``, version checks, ``__main__`` guards)
and ends at the first other statement.
"""

import logging
import re
from typing import List, Optional, Tuple

from base_classes import ImportInfo, ImportKind, LanguageParser, ParserConfig
from .base import ImportExtractorMixin, ParserMixin

logger = logging.getLogger(__name__)

IDENTIFIER = r'[^\W\d]\w*'
DOTTED_NAME = re.compile(rf'^{IDENTIFIER}(?:\.{IDENTIFIER})*$')
FROM_MODULE = re.compile(rf'^(\.*(?:{IDENTIFIER}(?:\.{IDENTIFIER})*)?)$')
NAME = re.compile(rf'^{IDENTIFIER}$')

DOCSTRING_START = re.compile(r'^[rRuUbBfF]{0,2}("""|\'\'\')')
# "Module doc." or 'doc' on a line of its own
SHORT_DOCSTRING = re.compile(r'^[rRuUbBfF]{0,2}([\'"])(?:\\.|(?!\1).)*\1\s*(?:#.*)?$')

# Block headers that commonly wrap imports
TOLERATED_LINES = [
    re.compile(r'^try\s*:'),
    re.compile(r'^except\b.*:'),
    re.compile(r'^else\s*:'),
    re.compile(r'^finally\s*:'),
    re.compile(r'^pass\b'),
    re.compile(r'^(?:el)?if\s+(?:typing\.)?TYPE_CHECKING\s*:'),
    re.compile(r'^if\s+__name__\s*==\s*[\'"]__main__[\'"]\s*:'),
    re.compile(r'^(?:el)?if\s+sys\.(?:version_info|platform)\b.*:'),
]


class PythonParser(LanguageParser, ParserMixin, ImportExtractorMixin):
    """Python import parser based on a header line scan."""

    config = ParserConfig(name="Python", extensions=[".py", ".pyi"])

    def parse_imports(self, content: str, file_path: str) -> List[ImportInfo]:
        return self.parse_with_fallback(
            self._scan_header,
            self.extract_python_style_imports,
            content,
            file_path,
        )

    def _scan_header(self, content: str) -> List[ImportInfo]:
        lines = content.split('\n')
        imports: List[ImportInfo] = []
        docstring_delimiter: Optional[str] = None
        index = 0

        while index < len(lines):
            line = lines[index].strip()
            line_number = index + 1
            index += 1

            if docstring_delimiter:
                if docstring_delimiter in line:
                    docstring_delimiter = None
                continue

            if not line or line.startswith('#'):
                continue

            docstring = DOCSTRING_START.match(line)
            if docstring:
                delimiter = docstring.group(1)
                if delimiter not in line[docstring.end():]:
                    docstring_delimiter = delimiter
                continue
            if SHORT_DOCSTRING.match(line):
                continue

            if line.startswith('@'):
                continue
            if any(pattern.match(line) for pattern in TOLERATED_LINES):
                continue

            if not (line.startswith('import ') or line.startswith('from ')):
                break

            statement, index = self._join_statement(lines, index, line)
            stop = False
            for part in statement.split(';'):
                part = part.strip()
                if not part:
                    continue
                parsed = self._parse_statement(part, line_number)
                if parsed is None:
                    stop = True
                    continue
                imports.extend(parsed)
            if stop:
                break

        return imports

    @staticmethod
    def _strip_comment(line: str) -> str:
        return line.split('#', 1)[0].rstrip()

    def _join_statement(self, lines: List[str], index: int, first: str) -> Tuple[str, int]:
        """Join backslash and parenthesis continuations into one logical line."""
        statement = self._strip_comment(first)

        while index < len(lines):
            if statement.endswith('\\'):
                statement = statement[:-1] + ' '
            elif statement.count('(') > statement.count(')'):
                statement += ' '
            else:
                break
            statement += self._strip_comment(lines[index].strip())
            index += 1

        return statement, index

    def _parse_statement(self, statement: str, line_number: int) -> Optional[List[ImportInfo]]:
        """Parse one import statement, or return None if it is not one."""
        if statement.startswith('import '):
            return self._parse_import(statement[len('import '):], line_number)

        if statement.startswith('from '):
            head, sep, names = statement[len('from '):].partition(' import')
            if not sep:
                return None
            return self._parse_from(head.strip(), names, line_number)

        return None

    @staticmethod
    def _parse_import(names: str, line_number: int) -> List[ImportInfo]:
        imports = []
        for part in names.split(','):
            tokens = part.split()
            if tokens and DOTTED_NAME.match(tokens[0]):
                imports.append(ImportInfo(module=tokens[0], kind=ImportKind.IMPORT, line=line_number))
        return imports

    @staticmethod
    def _parse_from(module: str, names: str, line_number: int) -> List[ImportInfo]:
        module = re.sub(r'\s+', '', module)
        if not module or not FROM_MODULE.match(module):
            return []

        imports = [ImportInfo(module=module, kind=ImportKind.FROM, line=line_number)]
        separator = '' if module.strip('.') == '' else '.'

        for part in names.strip().strip('()').split(','):
            tokens = part.split()
            if not tokens or tokens[0] == '*' or not NAME.match(tokens[0]):
                continue
            imports.append(ImportInfo(module=f"{module}{separator}{tokens[0]}",
                                      kind=ImportKind.FROM, line=line_number))
        return imports
