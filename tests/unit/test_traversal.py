"""
Unit tests for the import-following context collector
"""

import os
import shutil
import tempfile
import threading
from unittest.mock import Mock, patch

import pytest

from collection.stages.traversal import ContextCollector
from collection_errors import BatchExpansionError
from collector_configs import CollectorConfig
from file_utils import read_text_file


def write(root, relative, content=""):
    path = os.path.join(root, *relative.split('/'))
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)
    return path


def relative_paths(contexts):
    return [ctx.relative_path for ctx in contexts]


@pytest.fixture
def temp_dir():
    temp_dir = os.path.realpath(tempfile.mkdtemp())
    yield temp_dir
    shutil.rmtree(temp_dir)


class TestFollowImports:
    """Depth-first import following"""

    def setup_method(self):
        self.collector = ContextCollector(config=CollectorConfig(show_progress=False))

    def test_depth_first_order(self, temp_dir):
        a = write(temp_dir, "src/a.ts", "import { b } from './b';\nimport c from './c';\n")
        write(temp_dir, "src/b.ts", "import './d';\n")
        write(temp_dir, "src/c.ts", "export default 1;\n")
        write(temp_dir, "src/d.ts", "export {};\n")

        contexts = self.collector.collect([a], temp_dir)

        assert relative_paths(contexts) == ["src/a.ts", "src/b.ts", "src/d.ts", "src/c.ts"]

    def test_shared_import_is_visited_once(self, temp_dir):
        a = write(temp_dir, "a.js", "require('./b');\nrequire('./c');\n")
        write(temp_dir, "b.js", "require('./shared');\n")
        write(temp_dir, "c.js", "require('./shared');\n")
        write(temp_dir, "shared.js", "")

        contexts = self.collector.collect([a], temp_dir)

        assert relative_paths(contexts) == ["a.js", "b.js", "shared.js", "c.js"]

    def test_cycle_terminates(self, temp_dir):
        a = write(temp_dir, "a.ts", "import './b';\n")
        write(temp_dir, "b.ts", "import './a';\n")

        contexts = self.collector.collect([a], temp_dir)

        assert relative_paths(contexts) == ["a.ts", "b.ts"]

    def test_duplicate_seeds(self, temp_dir):
        a = write(temp_dir, "a.ts", "")

        contexts = self.collector.collect([a, a], temp_dir)

        assert relative_paths(contexts) == ["a.ts"]

    def test_seed_already_reached_through_imports(self, temp_dir):
        a = write(temp_dir, "a.ts", "import './b';\n")
        b = write(temp_dir, "b.ts", "")

        contexts = self.collector.collect([a, b], temp_dir)

        assert relative_paths(contexts) == ["a.ts", "b.ts"]

    def test_missing_seed_is_skipped(self, temp_dir):
        a = write(temp_dir, "a.ts", "")

        contexts = self.collector.collect([os.path.join(temp_dir, "missing.ts"), a], temp_dir)

        assert relative_paths(contexts) == ["a.ts"]

    def test_empty_seed_list(self, temp_dir):
        with pytest.raises(ValueError):
            self.collector.collect([], temp_dir)

    def test_non_source_targets_are_not_followed(self, temp_dir):
        a = write(temp_dir, "a.ts", "import data from './data.json';\nimport './styles.css';\n")
        write(temp_dir, "data.json", "{}")
        write(temp_dir, "styles.css", "body {}")

        contexts = self.collector.collect([a], temp_dir)

        assert relative_paths(contexts) == ["a.ts"]

    def test_non_source_seed_is_collected_without_parsing(self, temp_dir):
        readme = write(temp_dir, "README.md", "import './a';\n")
        write(temp_dir, "a.ts", "")

        contexts = self.collector.collect([readme], temp_dir)

        assert relative_paths(contexts) == ["README.md"]

    def test_external_packages_are_not_collected(self, temp_dir):
        a = write(temp_dir, "a.ts", "import pad from 'left-pad';\n")
        write(temp_dir, "package.json", "{}")
        write(temp_dir, "node_modules/left-pad/index.js", "")

        contexts = self.collector.collect([a], temp_dir)

        assert relative_paths(contexts) == ["a.ts"]

    def test_binary_seed_is_skipped(self, temp_dir):
        image = os.path.join(temp_dir, "logo.png")
        with open(image, 'wb') as f:
            f.write(b"\x89PNG\x00\x00")
        a = write(temp_dir, "a.ts", "")

        contexts = self.collector.collect([image, a], temp_dir)

        assert relative_paths(contexts) == ["a.ts"]

    def test_unreadable_file_is_skipped(self, temp_dir):
        a = write(temp_dir, "a.ts", "import './b';\nimport './c';\n")
        b = write(temp_dir, "b.ts", "")
        write(temp_dir, "c.ts", "")

        def flaky_read(path):
            if path == b:
                raise PermissionError("denied")
            return read_text_file(path)

        with patch('collection.stages.traversal.read_text_file', side_effect=flaky_read):
            contexts = self.collector.collect([a], temp_dir)

        assert relative_paths(contexts) == ["a.ts", "c.ts"]

    def test_contexts_hold_file_content(self, temp_dir):
        a = write(temp_dir, "a.py", "import os\n")

        ctx = self.collector.collect([a], temp_dir)[0]

        assert ctx.path == a
        assert ctx.content == "import os\n"

    def test_runs_are_independent(self, temp_dir):
        a = write(temp_dir, "a.ts", "import './b';\n")
        write(temp_dir, "b.ts", "")

        first = self.collector.collect([a], temp_dir)
        second = self.collector.collect([a], temp_dir)

        assert relative_paths(first) == relative_paths(second) == ["a.ts", "b.ts"]


class TestCancellation:

    def test_preset_event_collects_nothing(self, temp_dir):
        a = write(temp_dir, "a.ts", "import './b';\n")
        write(temp_dir, "b.ts", "")
        event = threading.Event()
        event.set()

        collector = ContextCollector(config=CollectorConfig(show_progress=False))

        assert collector.collect([a], temp_dir, cancel_event=event) == []

    def test_cancel_during_traversal_keeps_partial_result(self, temp_dir):
        a = write(temp_dir, "a.ts", "import './b';\n")
        write(temp_dir, "b.ts", "")
        event = threading.Event()

        def finder(file_path):
            event.set()
            return temp_dir

        collector = ContextCollector(config=CollectorConfig(show_progress=False), project_root_finder=finder)

        contexts = collector.collect([a], temp_dir, cancel_event=event)

        assert relative_paths(contexts) == ["a.ts"]


class TestDirectorySeeds:

    def setup_method(self):
        self.collector = ContextCollector(config=CollectorConfig(show_progress=False))

    def test_directory_contributes_text_files(self, temp_dir):
        write(temp_dir, "docs/b.md", "b")
        write(temp_dir, "docs/a.md", "a")
        with open(os.path.join(temp_dir, "docs", "c.bin"), 'wb') as f:
            f.write(b"\x00\x01\x02")

        contexts = self.collector.collect([os.path.join(temp_dir, "docs")], temp_dir)

        assert relative_paths(contexts) == ["docs/a.md", "docs/b.md"]

    def test_directory_files_do_not_follow_imports(self, temp_dir):
        write(temp_dir, "src/a.ts", "import '../lib/x';\n")
        write(temp_dir, "lib/x.ts", "")

        contexts = self.collector.collect([os.path.join(temp_dir, "src")], temp_dir)

        assert relative_paths(contexts) == ["src/a.ts"]


class TestCollectDirect:

    def test_only_given_files(self, temp_dir):
        a = write(temp_dir, "a.ts", "import './b';\n")
        write(temp_dir, "b.ts", "")
        image = os.path.join(temp_dir, "x.png")
        with open(image, 'wb') as f:
            f.write(b"\x00")
        collector = ContextCollector(config=CollectorConfig(show_progress=False))

        contexts = collector.collect_direct([a, image, os.path.join(temp_dir, "missing.ts"), a], temp_dir)

        assert relative_paths(contexts) == ["a.ts"]


class TestCollectAll:

    def setup_method(self):
        self.collector = ContextCollector(config=CollectorConfig(show_progress=False))

    def test_ignored_paths_are_pruned(self, temp_dir):
        write(temp_dir, "src/app.ts", "")
        write(temp_dir, "src/app.min.js", "")
        write(temp_dir, "node_modules/dep/index.js", "")
        write(temp_dir, "README.md", "")

        contexts = self.collector.collect_all([temp_dir], temp_dir)

        assert relative_paths(contexts) == ["README.md", "src/app.ts"]

    def test_overlapping_targets_are_deduplicated(self, temp_dir):
        write(temp_dir, "src/a.py", "")
        write(temp_dir, "b.py", "")

        contexts = self.collector.collect_all([temp_dir, os.path.join(temp_dir, "src")], temp_dir)

        assert relative_paths(contexts) == ["b.py", "src/a.py"]

    def test_custom_patterns_replace_defaults(self, temp_dir):
        write(temp_dir, "node_modules/dep/index.js", "")
        write(temp_dir, "notes.log", "")

        contexts = self.collector.collect_all([temp_dir], temp_dir, ignore_patterns=["*.log"])

        assert relative_paths(contexts) == ["node_modules/dep/index.js"]

    def test_defaults_to_workspace_root(self, temp_dir):
        write(temp_dir, "a.txt", "a")

        assert relative_paths(self.collector.collect_all([], temp_dir)) == ["a.txt"]


class TestPythonBatchMode:
    """Deferred Python seeds expanded out of process"""

    def test_python_seeds_are_expanded_after_other_seeds(self, temp_dir):
        main = write(temp_dir, "main.py", "import util\n")
        util = write(temp_dir, "util.py", "")
        web = write(temp_dir, "web.ts", "")
        expander = Mock()
        expander.resolve_all_imports_batch.return_value = [main, util]
        collector = ContextCollector(config=CollectorConfig(show_progress=False, python_batch=True),
                                     batch_expander=expander)

        contexts = collector.collect([main, web], temp_dir)

        assert relative_paths(contexts) == ["web.ts", "main.py", "util.py"]
        args, kwargs = expander.resolve_all_imports_batch.call_args
        assert args[0] == [main]
        assert kwargs["project_root"] == temp_dir

    def test_failed_expansion_falls_back_to_seeds(self, temp_dir):
        main = write(temp_dir, "main.py", "import util\n")
        write(temp_dir, "util.py", "")
        expander = Mock()
        expander.resolve_all_imports_batch.side_effect = BatchExpansionError("walker crashed")
        collector = ContextCollector(config=CollectorConfig(show_progress=False, python_batch=True),
                                     batch_expander=expander)

        contexts = collector.collect([main], temp_dir)

        assert relative_paths(contexts) == ["main.py"]

    def test_batch_mode_off_follows_imports_in_process(self, temp_dir):
        main = write(temp_dir, "main.py", "import util\n")
        write(temp_dir, "util.py", "")
        expander = Mock()
        collector = ContextCollector(config=CollectorConfig(show_progress=False), batch_expander=expander)

        contexts = collector.collect([main], temp_dir)

        assert relative_paths(contexts) == ["main.py", "util.py"]
        expander.resolve_all_imports_batch.assert_not_called()


if __name__ == "__main__":
    pytest.main([__file__])
