"""
tsconfig.json / jsconfig.json loading for path-alias resolution.

Only the options that affect module lookup are kept: ``baseUrl`` and
``paths``. Configs are JSON with comments and trailing commas, and may
inherit from other configs through ``extends``.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from file_utils import normalize_path, read_text_file

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ['tsconfig.json', 'jsconfig.json']


def strip_json_comments(text: str) -> str:
    """Remove // and /* */ comments that are outside string literals."""
    out = []
    i = 0
    n = len(text)
    in_string = False

    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == '\\' and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
        elif ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith('//', i):
            end = text.find('\n', i)
            i = n if end == -1 else end
        elif text.startswith('/*', i):
            end = text.find('*/', i + 2)
            i = n if end == -1 else end + 2
        else:
            out.append(ch)
            i += 1

    return ''.join(out)


def strip_trailing_commas(text: str) -> str:
    """Drop commas that directly precede a closing bracket or brace."""
    out = []
    i = 0
    n = len(text)
    in_string = False

    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == '\\' and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
            out.append(ch)
        elif ch == ',':
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            if j >= n or text[j] not in '}]':
                out.append(ch)
        else:
            out.append(ch)
        i += 1

    return ''.join(out)


def load_jsonc(file_path: str) -> Dict[str, Any]:
    """Parse a JSON-with-comments file into a dictionary."""
    text = read_text_file(file_path)
    if text.startswith('\ufeff'):
        text = text[1:]
    data = json.loads(strip_trailing_commas(strip_json_comments(text)))
    if not isinstance(data, dict):
        raise ValueError(f"{file_path} does not contain a JSON object")
    return data


@dataclass
class TsConfig:
    """Module lookup options of one effective tsconfig"""
    config_path: str
    base_url: Optional[str] = None  # Absolute
    paths: List[Tuple[str, List[str]]] = field(default_factory=list)  # Declaration order
    paths_base: Optional[str] = None  # Directory that paths targets are relative to

    @property
    def target_base(self) -> str:
        if self.base_url:
            return self.base_url
        return self.paths_base or os.path.dirname(self.config_path)


class TsConfigCache:
    """Effective tsconfig per project root, loaded once and kept for the process lifetime"""

    def __init__(self):
        self._configs: Dict[str, Optional[TsConfig]] = {}

    def get(self, project_root: str) -> Optional[TsConfig]:
        root = normalize_path(project_root)
        if root not in self._configs:
            config_path = self.find_config(root)
            self._configs[root] = self._load(config_path) if config_path else None
        return self._configs[root]

    def __len__(self) -> int:
        return len(self._configs)

    def clear(self):
        self._configs.clear()

    @staticmethod
    def find_config(start_dir: str) -> Optional[str]:
        """Nearest tsconfig.json (then jsconfig.json) at or above start_dir"""
        current = start_dir
        while True:
            for name in CONFIG_FILENAMES:
                candidate = os.path.join(current, name)
                if os.path.isfile(candidate):
                    return candidate
            parent = os.path.dirname(current)
            if parent == current:
                return None
            current = parent

    def _load(self, config_path: str) -> Optional[TsConfig]:
        try:
            options = self._read_options(config_path, set())
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load {config_path}: {e}")
            return None

        config = TsConfig(config_path=config_path)
        base_url = options.get('baseUrl')
        if base_url:
            config.base_url = base_url[0]
        paths = options.get('paths')
        if paths:
            declared, config.paths_base = paths
            config.paths = [
                (pattern, [t for t in targets if isinstance(t, str)])
                for pattern, targets in declared.items()
                if isinstance(targets, list)
            ]

        logger.debug(f"Loaded {config_path}: baseUrl={config.base_url}, {len(config.paths)} path aliases")
        return config

    def _read_options(self, config_path: str, seen: Set[str]) -> Dict[str, Tuple[Any, str]]:
        """compilerOptions of a config and its parents.

        Each value is paired with the directory of the config declaring it;
        the child config overrides its parents key by key.
        """
        config_path = normalize_path(config_path)
        if config_path in seen:
            logger.warning(f"Circular tsconfig extends chain at {config_path}")
            return {}
        seen.add(config_path)

        data = load_jsonc(config_path)
        config_dir = os.path.dirname(config_path)
        options: Dict[str, Tuple[Any, str]] = {}

        extends = data.get('extends')
        parents = extends if isinstance(extends, list) else [extends] if extends else []
        for parent in parents:
            if not isinstance(parent, str):
                continue
            parent_path = self._resolve_extends(parent, config_dir)
            if parent_path is None:
                logger.warning(f"Cannot find base config '{parent}' extended by {config_path}")
                continue
            try:
                options.update(self._read_options(parent_path, set(seen)))
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to load base config {parent_path}: {e}")

        compiler_options = data.get('compilerOptions')
        if not isinstance(compiler_options, dict):
            compiler_options = {}
        if isinstance(compiler_options.get('baseUrl'), str):
            base_url = normalize_path(os.path.join(config_dir, compiler_options['baseUrl']))
            options['baseUrl'] = (base_url, config_dir)
        if isinstance(compiler_options.get('paths'), dict):
            options['paths'] = (compiler_options['paths'], config_dir)

        return options

    @staticmethod
    def _resolve_extends(reference: str, config_dir: str) -> Optional[str]:
        if reference.startswith('.') or os.path.isabs(reference):
            candidate = os.path.join(config_dir, reference)
            for path in (candidate, candidate + '.json'):
                if os.path.isfile(path):
                    return path
            return None

        # Shared config package, e.g. "@tsconfig/node18/tsconfig.json"
        current = config_dir
        while True:
            package_path = os.path.join(current, 'node_modules', reference)
            candidates = [package_path, package_path + '.json', os.path.join(package_path, 'tsconfig.json')]
            for path in candidates:
                if os.path.isfile(path):
                    return path
            parent = os.path.dirname(current)
            if parent == current:
                return None
            current = parent
