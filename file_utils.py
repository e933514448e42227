"""
File system helpers used by the parsers, resolvers and collection stages.
"""

import codecs
import logging
import os
from typing import Callable, Dict, Iterable, Iterator, List, Optional

logger = logging.getLogger(__name__)

TEXT_SAMPLE_SIZE = 1024

# Markers that identify a project root regardless of language
GENERIC_PROJECT_MARKERS = ['.git', 'package.json', 'tsconfig.json', 'jsconfig.json']


def is_text_file(file_path: str) -> bool:
    """Classify a file as text by sampling its first 1024 bytes.

    A NUL byte or an invalid UTF-8 sequence marks the file as binary.
    Unreadable files are treated as binary.
    """
    try:
        with open(file_path, 'rb') as f:
            sample = f.read(TEXT_SAMPLE_SIZE)
    except OSError:
        return False

    if b'\x00' in sample:
        return False

    decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
    # A multi-byte character may be cut by the sample boundary
    text = decoder.decode(sample, final=len(sample) < TEXT_SAMPLE_SIZE)
    return "\ufffd" not in text


def read_text_file(file_path: str) -> str:
    """Read a whole file as UTF-8 text, keeping its line endings."""
    with open(file_path, 'r', encoding='utf-8', errors='replace', newline='') as f:
        return f.read()


def normalize_path(file_path: str) -> str:
    """Absolute path with symlinks and '.'/'..' segments resolved."""
    return os.path.realpath(os.path.abspath(file_path))


def is_within(path: str, root: str) -> bool:
    """True if path equals root or lies beneath it."""
    try:
        return os.path.commonpath([path, root]) == root
    except ValueError:
        return False


def display_path(file_path: str, workspace_root: str) -> str:
    """Path relative to the workspace root with forward slashes."""
    try:
        relative = os.path.relpath(file_path, workspace_root)
    except ValueError:
        # Different drives on Windows
        relative = file_path
    return relative.replace(os.sep, '/')


def find_project_root(start_path: str,
                      markers: Iterable[str],
                      boundary: Optional[str] = None) -> str:
    """Find the nearest directory at or above start_path holding a marker file.

    The search never climbs above ``boundary`` when one is given. If no marker
    is found the boundary (or the starting directory) is returned.
    """
    markers = list(markers)
    current = normalize_path(start_path)
    if os.path.isfile(current):
        current = os.path.dirname(current)
    if boundary:
        boundary = normalize_path(boundary)
        if not is_within(current, boundary):
            boundary = None
    fallback = boundary or current

    while True:
        if any(os.path.exists(os.path.join(current, marker)) for marker in markers):
            return current
        if boundary and current == fallback:
            break
        parent = os.path.dirname(current)
        if parent == current:
            break
        if boundary and not is_within(parent, fallback):
            break
        current = parent

    return fallback


class ProjectRootFinder:
    """Cached marker-based project root lookup, one entry per directory"""

    def __init__(self, markers: Iterable[str], boundary: Optional[str] = None):
        self.markers = list(dict.fromkeys(list(markers) + GENERIC_PROJECT_MARKERS))
        self.boundary = normalize_path(boundary) if boundary else None
        self._cache: Dict[str, str] = {}

    def __call__(self, file_path: str) -> str:
        directory = os.path.dirname(normalize_path(file_path))
        if directory not in self._cache:
            self._cache[directory] = find_project_root(directory, self.markers, self.boundary)
        return self._cache[directory]


def iter_text_files(directory: str,
                    skip_dir: Optional[Callable[[str], bool]] = None,
                    skip_file: Optional[Callable[[str], bool]] = None) -> Iterator[str]:
    """Walk a directory tree yielding text files in sorted name order.

    ``skip_dir`` prunes whole subtrees, ``skip_file`` drops single files;
    both receive absolute paths.
    """
    def on_error(error: OSError):
        logger.error(f"Failed to read directory: {error.filename}: {error}")

    for root, dirs, files in os.walk(directory, topdown=True, onerror=on_error):
        dirs.sort()
        if skip_dir:
            dirs[:] = [d for d in dirs if not skip_dir(os.path.join(root, d))]

        for filename in sorted(files):
            file_path = os.path.join(root, filename)
            if skip_file and skip_file(file_path):
                continue
            if not os.path.isfile(file_path):
                continue
            if is_text_file(file_path):
                yield file_path


def list_text_files(directory: str, **kwargs) -> List[str]:
    return list(iter_text_files(directory, **kwargs))
