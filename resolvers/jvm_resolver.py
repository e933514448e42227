"""
JVM (Java / Kotlin) import resolution.

Fully qualified names are mapped to source files below the source
directories of the importing project. Source directories come from the
build layout: Maven modules, Gradle includes and source sets, or the
conventional layout for plain projects.
"""

import logging
import os
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set

from base_classes import ImportResolver, ResolverConfig
from file_utils import normalize_path, read_text_file

logger = logging.getLogger(__name__)

CONVENTIONAL_SOURCE_DIRS = ['src/main/java', 'src/main/kotlin', 'src/test/java', 'src/test/kotlin']
SOURCE_EXTENSIONS = ['.java', '.kt']

GRADLE_BUILD_FILES = ['build.gradle', 'build.gradle.kts']
GRADLE_SETTINGS_FILES = ['settings.gradle', 'settings.gradle.kts']

GRADLE_INCLUDE = re.compile(r'^\s*include\b(.*)$', re.MULTILINE)
GRADLE_SRC_DIRS = re.compile(r'srcDirs?\b(.*)$', re.MULTILINE | re.IGNORECASE)
QUOTED = re.compile(r'[\'"]([^\'"]+)[\'"]')


class BuildSystem(Enum):
    MAVEN = "maven"
    GRADLE = "gradle"
    PLAIN = "plain"


@dataclass
class ProjectInfo:
    """Source layout of one JVM project"""
    build_system: BuildSystem
    source_dirs: List[str] = field(default_factory=list)  # Existing, ordered, unique
    modules: List[str] = field(default_factory=list)


def _local_name(tag: str) -> str:
    return tag.rsplit('}', 1)[-1]


def _child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _children(element: Optional[ET.Element], name: str) -> List[ET.Element]:
    if element is None:
        return []
    return [child for child in element if _local_name(child.tag) == name]


def _conventional_dirs(base_dir: str) -> List[str]:
    return [os.path.join(base_dir, *d.split('/')) for d in CONVENTIONAL_SOURCE_DIRS]


class ProjectLayoutAnalyzer:
    """Builds ProjectInfo from the build files found in a project root"""

    def analyze(self, project_root: str) -> ProjectInfo:
        if os.path.isfile(os.path.join(project_root, 'pom.xml')):
            info = ProjectInfo(build_system=BuildSystem.MAVEN)
            self._setup_maven(project_root, info)
        elif any(os.path.isfile(os.path.join(project_root, f))
                 for f in GRADLE_BUILD_FILES + GRADLE_SETTINGS_FILES):
            info = ProjectInfo(build_system=BuildSystem.GRADLE)
            self._setup_gradle(project_root, info)
        else:
            info = ProjectInfo(build_system=BuildSystem.PLAIN)
            info.source_dirs = _conventional_dirs(project_root) + [os.path.join(project_root, 'src')]

        # Only existing directories, first occurrence wins
        existing = []
        for directory in info.source_dirs:
            directory = os.path.normpath(directory)
            if directory not in existing and os.path.isdir(directory):
                existing.append(directory)
        info.source_dirs = existing

        logger.debug(f"{info.build_system.value} project at {project_root}: "
                      f"{len(info.source_dirs)} source dirs, {len(info.modules)} modules")
        return info

    def _setup_maven(self, project_root: str, info: ProjectInfo):
        try:
            self._add_maven_module(project_root, project_root, info, set())
        except (OSError, ET.ParseError) as e:
            logger.warning(f"Failed to read Maven project at {project_root}, using conventional layout: {e}")
            info.source_dirs = _conventional_dirs(project_root)

    def _add_maven_module(self, module_dir: str, project_root: str, info: ProjectInfo, seen: Set[str]):
        module_dir = os.path.normpath(module_dir)
        if module_dir in seen:
            return
        seen.add(module_dir)

        info.source_dirs.extend(_conventional_dirs(module_dir))

        pom_path = os.path.join(module_dir, 'pom.xml')
        if not os.path.isfile(pom_path):
            return

        project = ET.parse(pom_path).getroot()

        build = _child(project, 'build')
        if build is not None:
            for name in ('sourceDirectory', 'testSourceDirectory'):
                element = _child(build, name)
                if element is not None and element.text and '${' not in element.text:
                    info.source_dirs.append(os.path.join(module_dir, element.text.strip()))

        for module in _children(_child(project, 'modules'), 'module'):
            if not module.text:
                continue
            child_dir = os.path.join(module_dir, module.text.strip())
            relative = os.path.relpath(child_dir, project_root).replace(os.sep, '/')
            if relative not in info.modules:
                info.modules.append(relative)
            try:
                self._add_maven_module(child_dir, project_root, info, seen)
            except (OSError, ET.ParseError) as e:
                logger.warning(f"Failed to read Maven module {child_dir}: {e}")

    def _setup_gradle(self, project_root: str, info: ProjectInfo):
        try:
            for settings_file in GRADLE_SETTINGS_FILES:
                settings_path = os.path.join(project_root, settings_file)
                if os.path.isfile(settings_path):
                    info.modules.extend(self._gradle_includes(read_text_file(settings_path)))
                    break

            info.source_dirs.extend(self._gradle_source_dirs(project_root))
            for module in info.modules:
                module_dir = os.path.join(project_root, *module.split('/'))
                info.source_dirs.extend(self._gradle_source_dirs(module_dir))
                info.source_dirs.extend(_conventional_dirs(module_dir))
        except OSError as e:
            logger.warning(f"Failed to read Gradle project at {project_root}, using conventional layout: {e}")
            info.modules = []
            info.source_dirs = []

        info.source_dirs.extend(_conventional_dirs(project_root))

    @staticmethod
    def _gradle_includes(settings: str) -> List[str]:
        """include ':app', ':lib:core' -> ['app', 'lib/core']"""
        modules = []
        for match in GRADLE_INCLUDE.finditer(settings):
            for name in QUOTED.findall(match.group(1)):
                module = name.strip(':').replace(':', '/')
                if module and module not in modules:
                    modules.append(module)
        return modules

    @staticmethod
    def _gradle_source_dirs(module_dir: str) -> List[str]:
        for build_file in GRADLE_BUILD_FILES:
            build_path = os.path.join(module_dir, build_file)
            if os.path.isfile(build_path):
                build = read_text_file(build_path)
                return [os.path.join(module_dir, d)
                        for match in GRADLE_SRC_DIRS.finditer(build)
                        for d in QUOTED.findall(match.group(1))]
        return []


def has_build_files(directory: str) -> bool:
    return any(os.path.isfile(os.path.join(directory, f))
               for f in ['pom.xml'] + GRADLE_BUILD_FILES + GRADLE_SETTINGS_FILES)


class ProjectInfoCache:
    """ProjectInfo per normalized project root"""

    def __init__(self, analyzer: Optional[ProjectLayoutAnalyzer] = None):
        self.analyzer = analyzer or ProjectLayoutAnalyzer()
        self._projects: Dict[str, ProjectInfo] = {}
        self._build_roots: Dict[str, str] = {}

    def get(self, project_root: str) -> ProjectInfo:
        root = normalize_path(project_root)
        if root not in self._projects:
            self._projects[root] = self.analyzer.analyze(root)
        return self._projects[root]

    def build_root(self, project_root: str) -> str:
        """Outermost Maven aggregator or Gradle build that lists project_root as a module.

        A submodule carries its own pom.xml or build.gradle, so the nearest
        marker directory only knows that module's source dirs. Every ancestor
        whose module list names the current root takes its place.
        """
        root = normalize_path(project_root)
        if root not in self._build_roots:
            current = root
            ancestor = os.path.dirname(root)
            while True:
                if has_build_files(ancestor):
                    relative = os.path.relpath(current, ancestor).replace(os.sep, '/')
                    if relative in self.get(ancestor).modules:
                        current = ancestor
                parent = os.path.dirname(ancestor)
                if parent == ancestor:
                    break
                ancestor = parent
            if current != root:
                logger.debug(f"{root} is a module of the build at {current}")
            self._build_roots[root] = current
        return self._build_roots[root]

    def __len__(self) -> int:
        return len(self._projects)

    def clear(self):
        self._projects.clear()
        self._build_roots.clear()


class JvmResolver(ImportResolver):
    """Resolves Java and Kotlin imports against the project's source directories"""

    config = ResolverConfig(
        extensions=['.java', '.kt', '.kts'],
        config_files=['pom.xml', 'build.gradle', 'build.gradle.kts',
                      'settings.gradle', 'settings.gradle.kts'],
    )

    def __init__(self, project_cache: Optional[ProjectInfoCache] = None):
        self.project_cache = project_cache or ProjectInfoCache()

    def resolve(self, specifier: str, importing_dir: str, project_root: str) -> Optional[str]:
        if not specifier or specifier.endswith('*'):
            return None  # Wildcard imports name a package, not a file

        info = self.project_cache.get(self.project_cache.build_root(project_root))
        if not info.source_dirs:
            return None

        parts = specifier.split('.')
        while parts:
            resolved = self._find_class(info, parts)
            if resolved:
                return resolved
            # import static a.b.Outer.member / import a.b.Outer.Inner
            if len(parts) >= 2 and parts[-2][:1].isupper():
                parts = parts[:-1]
                continue
            break

        return None

    @staticmethod
    def _find_class(info: ProjectInfo, parts: List[str]) -> Optional[str]:
        for source_dir in info.source_dirs:
            base = os.path.join(source_dir, *parts)
            for ext in SOURCE_EXTENSIONS:
                if os.path.isfile(base + ext):
                    return normalize_path(base + ext)
        return None
