"""
Standalone Python import walker.

Run out of process by PythonBatchExpander. Reads a JSON request on stdin::

    {"seeds": [...], "project_root": "...", "ignore_patterns": [...]}

and prints a JSON list with every local module reachable from the seeds,
seeds first in depth-first order. Only files under the project root are
reported.
"""

import ast
import json
import os
import sys
from typing import Iterator, List, Optional, Sequence

import pathspec


def find_module(base_dir: str, parts: Sequence[str]) -> Optional[str]:
    module_path = os.path.join(base_dir, *parts)
    for candidate in (module_path + '.py', os.path.join(module_path, '__init__.py')):
        if os.path.isfile(candidate):
            return os.path.realpath(candidate)
    return None


def package_root(file_path: str) -> str:
    """Directory containing the outermost package of file_path"""
    directory = os.path.dirname(file_path)
    while os.path.isfile(os.path.join(directory, '__init__.py')):
        parent = os.path.dirname(directory)
        if parent == directory:
            break
        directory = parent
    return directory


def build_search_path(project_root: str, seeds: List[str]) -> List[str]:
    search_path = [project_root]
    src_dir = os.path.join(project_root, 'src')
    if os.path.isdir(src_dir):
        search_path.append(src_dir)
    for seed in seeds:
        root = package_root(seed)
        if root not in search_path:
            search_path.append(root)
    return search_path


def iter_import_targets(tree: ast.AST) -> Iterator[tuple]:
    """(level, module parts, imported names) per import, in source order"""
    nodes = [n for n in ast.walk(tree) if isinstance(n, (ast.Import, ast.ImportFrom))]
    nodes.sort(key=lambda n: (n.lineno, n.col_offset))
    for node in nodes:
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield 0, alias.name.split('.'), []
        else:
            parts = node.module.split('.') if node.module else []
            names = [alias.name for alias in node.names if alias.name != '*']
            yield node.level, parts, names


class ImportWalker:

    def __init__(self, project_root: str, seeds: List[str], ignore_patterns: List[str]):
        self.project_root = os.path.realpath(project_root)
        self.seeds = [os.path.realpath(s) for s in seeds]
        self.search_path = build_search_path(self.project_root, self.seeds)
        self.spec = pathspec.GitIgnoreSpec.from_lines(ignore_patterns)
        self.visited = set()

    def is_local(self, file_path: str) -> bool:
        try:
            relative = os.path.relpath(file_path, self.project_root)
        except ValueError:
            return False
        if relative.startswith('..'):
            return False
        relative = relative.replace(os.sep, '/')
        return not (self.spec.match_file(relative) or self.spec.match_file(os.path.basename(relative)))

    def resolve(self, file_path: str, level: int, parts: List[str], names: List[str]) -> List[str]:
        if level:
            base = os.path.dirname(file_path)
            for _ in range(level - 1):
                base = os.path.dirname(base)
            bases = [base]
        else:
            bases = [os.path.dirname(file_path)] + self.search_path

        found = []
        for candidate in [parts] + [parts + [name] for name in names]:
            if not candidate:
                continue
            for base in bases:
                resolved = find_module(base, candidate)
                if resolved:
                    found.append(resolved)
                    break
        return found

    def imports_of(self, file_path: str) -> List[str]:
        try:
            with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
                tree = ast.parse(f.read(), filename=file_path)
        except (OSError, SyntaxError, ValueError) as e:
            print(f"skipping imports of {file_path}: {e}", file=sys.stderr)
            return []

        targets = []
        for level, parts, names in iter_import_targets(tree):
            for resolved in self.resolve(file_path, level, parts, names):
                if resolved not in targets and self.is_local(resolved):
                    targets.append(resolved)
        return targets

    def walk(self) -> List[str]:
        ordered = []
        stack = list(reversed(self.seeds))
        while stack:
            file_path = stack.pop()
            if file_path in self.visited or not os.path.isfile(file_path):
                continue
            self.visited.add(file_path)
            ordered.append(file_path)
            stack.extend(reversed(self.imports_of(file_path)))
        return ordered


def main() -> int:
    request = json.load(sys.stdin)
    walker = ImportWalker(
        project_root=request['project_root'],
        seeds=request['seeds'],
        ignore_patterns=request.get('ignore_patterns', []),
    )
    json.dump(walker.walk(), sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
