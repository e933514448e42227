#!/usr/bin/env python3
"""
Unit tests for JVM project layout detection and import resolution.
"""

import os
import shutil
import tempfile

import pytest

from resolvers.jvm_resolver import (BuildSystem, JvmResolver, ProjectInfoCache,
                                    ProjectLayoutAnalyzer)


def write(root, relative, content=""):
    path = os.path.join(root, *relative.split('/'))
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)
    return path


MAVEN_POM = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <modules>
    <module>core</module>
    <module>web</module>
  </modules>
</project>
"""

CORE_POM = """<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modules>
    <module>sub</module>
  </modules>
  <build>
    <sourceDirectory>src/java</sourceDirectory>
    <testSourceDirectory>${project.basedir}/test</testSourceDirectory>
  </build>
</project>
"""


@pytest.fixture
def temp_dir():
    temp_dir = os.path.realpath(tempfile.mkdtemp())
    yield temp_dir
    shutil.rmtree(temp_dir)


class TestProjectLayoutAnalyzer:
    """Build layout detection"""

    def setup_method(self):
        self.analyzer = ProjectLayoutAnalyzer()

    def test_maven_multi_module(self, temp_dir):
        write(temp_dir, "pom.xml", MAVEN_POM)
        write(temp_dir, "core/pom.xml", CORE_POM)
        write(temp_dir, "core/src/java/com/a/Core.java")
        write(temp_dir, "core/sub/src/main/java/com/a/Sub.java")
        write(temp_dir, "web/src/main/kotlin/com/a/Web.kt")
        write(temp_dir, "src/main/java/com/a/App.java")

        info = self.analyzer.analyze(temp_dir)

        assert info.build_system == BuildSystem.MAVEN
        assert info.modules == ["core", "core/sub", "web"]
        assert info.source_dirs == [
            os.path.join(temp_dir, "src", "main", "java"),
            os.path.join(temp_dir, "core", "src", "java"),
            os.path.join(temp_dir, "core", "sub", "src", "main", "java"),
            os.path.join(temp_dir, "web", "src", "main", "kotlin"),
        ]

    def test_broken_pom_uses_conventional_layout(self, temp_dir):
        write(temp_dir, "pom.xml", "<project><unclosed></project>")
        write(temp_dir, "src/main/java/A.java")

        info = self.analyzer.analyze(temp_dir)

        assert info.build_system == BuildSystem.MAVEN
        assert info.source_dirs == [os.path.join(temp_dir, "src", "main", "java")]

    def test_gradle_includes_and_source_sets(self, temp_dir):
        write(temp_dir, "settings.gradle.kts", 'rootProject.name = "demo"\ninclude(":app", ":lib:core")\n')
        write(temp_dir, "build.gradle.kts", "")
        write(temp_dir, "app/build.gradle", "sourceSets { main { java { srcDirs = ['gen/java'] } } }\n")
        write(temp_dir, "app/gen/java/com/x/Gen.java")
        write(temp_dir, "app/src/main/java/com/x/App.java")
        write(temp_dir, "lib/core/src/main/kotlin/com/x/Core.kt")

        info = self.analyzer.analyze(temp_dir)

        assert info.build_system == BuildSystem.GRADLE
        assert info.modules == ["app", "lib/core"]
        assert info.source_dirs == [
            os.path.join(temp_dir, "app", "gen", "java"),
            os.path.join(temp_dir, "app", "src", "main", "java"),
            os.path.join(temp_dir, "lib", "core", "src", "main", "kotlin"),
        ]

    def test_plain_project(self, temp_dir):
        write(temp_dir, "src/com/x/Main.java")

        info = self.analyzer.analyze(temp_dir)

        assert info.build_system == BuildSystem.PLAIN
        assert info.source_dirs == [os.path.join(temp_dir, "src")]

    def test_gradle_include_parsing(self):
        settings = "include ':a', ':b:c'\ninclude(\"d\")\n// includeBuild is not a module\n"

        assert ProjectLayoutAnalyzer._gradle_includes(settings) == ["a", "b/c", "d"]


class TestJvmResolver:
    """Fully qualified name resolution"""

    def setup_method(self):
        self.resolver = JvmResolver()

    @pytest.fixture
    def project(self, temp_dir):
        write(temp_dir, "pom.xml", "<project/>")
        write(temp_dir, "src/main/java/com/example/model/User.java")
        write(temp_dir, "src/main/java/com/example/util/Helpers.java")
        write(temp_dir, "src/main/kotlin/com/example/data/Repository.kt")
        return temp_dir

    def test_class_import(self, project):
        expected = os.path.join(project, "src", "main", "java", "com", "example", "model", "User.java")

        assert self.resolver.resolve("com.example.model.User", project, project) == expected

    def test_kotlin_source(self, project):
        expected = os.path.join(project, "src", "main", "kotlin", "com", "example", "data", "Repository.kt")

        assert self.resolver.resolve("com.example.data.Repository", project, project) == expected

    def test_static_member_and_nested_class(self, project):
        expected = os.path.join(project, "src", "main", "java", "com", "example", "util", "Helpers.java")

        assert self.resolver.resolve("com.example.util.Helpers.help", project, project) == expected
        assert self.resolver.resolve("com.example.util.Helpers.Inner.CONST", project, project) == expected

    def test_lowercase_parent_is_not_retried(self, project):
        assert self.resolver.resolve("com.example.model.missing", project, project) is None

    def test_wildcard_imports_resolve_to_nothing(self, project):
        assert self.resolver.resolve("com.example.model.*", project, project) is None

    def test_library_imports_are_unresolved(self, project):
        assert self.resolver.resolve("java.util.List", project, project) is None

    def test_project_layout_is_cached(self, project):
        cache = ProjectInfoCache()
        resolver = JvmResolver(cache)

        resolver.resolve("com.example.model.User", project, project)
        resolver.resolve("com.example.util.Helpers", project, project)

        assert len(cache) == 1

    def test_import_into_sibling_maven_module(self, temp_dir):
        write(temp_dir, "pom.xml", MAVEN_POM)
        write(temp_dir, "core/pom.xml", "<project/>")
        write(temp_dir, "web/pom.xml", "<project/>")
        core = write(temp_dir, "core/src/main/java/com/a/Core.java")
        web = os.path.join(temp_dir, "web")
        write(temp_dir, "web/src/main/java/com/a/Web.java")

        # The importing file's nearest root is its own module
        assert self.resolver.resolve("com.a.Core", web, web) == core

    def test_import_into_nested_gradle_module(self, temp_dir):
        write(temp_dir, "settings.gradle", "include ':app', ':lib:core'\n")
        write(temp_dir, "app/build.gradle")
        write(temp_dir, "lib/core/build.gradle")
        target = write(temp_dir, "lib/core/src/main/kotlin/com/x/Util.kt")
        app = os.path.join(temp_dir, "app")

        assert self.resolver.resolve("com.x.Util", app, app) == target

    def test_build_root(self, temp_dir):
        write(temp_dir, "pom.xml", MAVEN_POM)
        write(temp_dir, "core/pom.xml", CORE_POM)
        write(temp_dir, "core/sub/pom.xml", "<project/>")
        write(temp_dir, "standalone/pom.xml", "<project/>")
        cache = ProjectInfoCache()

        assert cache.build_root(os.path.join(temp_dir, "core", "sub")) == temp_dir
        assert cache.build_root(os.path.join(temp_dir, "core")) == temp_dir
        assert cache.build_root(temp_dir) == temp_dir
        # Not listed in the parent's <modules>
        standalone = os.path.join(temp_dir, "standalone")
        assert cache.build_root(standalone) == standalone

    def test_extensions(self):
        assert self.resolver.can_handle("A.java")
        assert self.resolver.can_handle("build.gradle.kts")
        assert not self.resolver.can_handle("a.py")


if __name__ == "__main__":
    pytest.main([__file__])
