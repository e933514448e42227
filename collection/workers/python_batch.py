"""
Python Batch Expander
=====================

Expands all Python seed files in a single out-of-process walk instead of
following their imports one file at a time.
"""

import json
import logging
import os
import subprocess
import sys
from typing import List, Optional

from collection_errors import BatchExpansionError
from file_utils import normalize_path

logger = logging.getLogger(__name__)

WALKER_SCRIPT = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'python_import_walker.py')


class PythonBatchExpander:
    """Runs python_import_walker.py on a set of seeds and returns the reachable files"""

    def __init__(self, timeout: float = 60.0, python_executable: Optional[str] = None):
        self.timeout = timeout
        self.python_executable = python_executable or sys.executable

    def resolve_all_imports_batch(self,
                                  seeds: List[str],
                                  ignore_patterns: List[str],
                                  project_root: Optional[str] = None) -> List[str]:
        """
        Walk the imports of every seed in one helper process.

        Args:
            seeds: Python files to expand
            ignore_patterns: gitignore-style patterns excluded from the walk
            project_root: Only files below this directory are returned;
                defaults to the common directory of the seeds

        Returns:
            Absolute paths of the seeds and every local module they reach

        Raises:
            BatchExpansionError: The helper failed, timed out or returned garbage
        """
        if not seeds:
            return []

        seeds = [normalize_path(s) for s in seeds]
        if project_root is None:
            project_root = os.path.commonpath([os.path.dirname(s) for s in seeds])

        request = json.dumps({
            'seeds': seeds,
            'project_root': normalize_path(project_root),
            'ignore_patterns': list(ignore_patterns),
        })

        logger.info(f"Expanding {len(seeds)} Python files in batch")
        try:
            result = subprocess.run(
                [self.python_executable, WALKER_SCRIPT],
                input=request,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=True
            )
        except subprocess.TimeoutExpired as e:
            raise BatchExpansionError(f"Python import walker timed out after {self.timeout}s", cause=e)
        except subprocess.CalledProcessError as e:
            raise BatchExpansionError(
                f"Python import walker exited with status {e.returncode}",
                cause=e,
                details={'stderr': (e.stderr or '')[-2000:]}
            )
        except OSError as e:
            raise BatchExpansionError("Could not start the Python import walker", cause=e)

        if result.stderr:
            logger.debug(f"Python import walker: {result.stderr.strip()}")

        try:
            files = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise BatchExpansionError("Python import walker returned invalid JSON", cause=e)

        if not isinstance(files, list) or not all(isinstance(f, str) for f in files):
            raise BatchExpansionError("Python import walker returned an unexpected payload",
                                      details={'payload_type': type(files).__name__})

        logger.info(f"Batch expansion reached {len(files)} Python files")
        return [normalize_path(f) for f in files]
