"""
Unit tests for the gitignore-style ignore filter
"""

import warnings

import pytest

from base_classes import FileContext
from collection.stages.filtering import IgnoreFilter
from collector_configs import DEFAULT_IGNORE_PATTERNS


def context(relative_path):
    return FileContext(path="/ws/" + relative_path, content="x", relative_path=relative_path)


class TestIgnoreFilter:
    """Pattern matching against relative paths and basenames"""

    def setup_method(self):
        self.filter = IgnoreFilter(DEFAULT_IGNORE_PATTERNS)

    def test_directory_patterns_match_nested_files(self):
        assert self.filter.is_ignored("node_modules/react/index.js")
        assert self.filter.is_ignored("packages/web/node_modules/x/a.js")
        assert self.filter.is_ignored("build/out.js")

    def test_basename_patterns(self):
        assert self.filter.is_ignored("public/vendor.min.js")
        assert self.filter.is_ignored("src/.DS_Store")
        assert self.filter.is_ignored("package-lock.json")

    def test_regular_sources_are_kept(self):
        assert not self.filter.is_ignored("src/app.ts")
        assert not self.filter.is_ignored("src/builder.ts")
        assert not self.filter.is_ignored("package.json")

    def test_windows_separators(self):
        assert self.filter.is_ignored("dist\\bundle.js")

    def test_directory_checks(self):
        assert self.filter.is_ignored_dir("node_modules")
        assert self.filter.is_ignored_dir("src/__pycache__")
        assert not self.filter.is_ignored_dir("src")
        assert not self.filter.is_ignored_dir(".")
        assert not self.filter.is_ignored_dir("")

    def test_directory_only_pattern_does_not_match_file(self):
        ignore = IgnoreFilter(["build/"])
        assert not ignore.is_ignored("build")
        assert ignore.is_ignored_dir("build")

    def test_negation(self):
        ignore = IgnoreFilter(["*.log", "!keep.log"])
        assert ignore.is_ignored("debug.log")
        assert not ignore.is_ignored("keep.log")

    def test_compiling_patterns_emits_no_deprecation_warning(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            ignore = IgnoreFilter(["build/", "*.min.js"])
            ignore.is_ignored("src/app.min.js")

        assert not [w for w in caught if issubclass(w.category, DeprecationWarning)]

    def test_empty_filter(self):
        ignore = IgnoreFilter(["", "   "])
        assert not ignore
        assert not ignore.is_ignored("node_modules/x.js")

    def test_filter_contexts_keeps_order(self):
        contexts = [context("src/a.ts"), context("dist/a.js"), context("src/b.min.js"), context("src/b.ts")]

        kept = self.filter.filter_contexts(contexts)

        assert [c.relative_path for c in kept] == ["src/a.ts", "src/b.ts"]


if __name__ == "__main__":
    pytest.main([__file__])
