"""
Import resolvers for the code collector.

A resolver maps an import specifier to a file inside the project, or to
None when the import is external.
"""

from .registry import (
    ResolverRegistry,
    create_default_registries,
    create_default_resolver_registry,
)
from .node_resolver import NodeResolver
from .tsconfig_loader import TsConfig, TsConfigCache
from .jvm_resolver import BuildSystem, JvmResolver, ProjectInfo, ProjectInfoCache
from .python_resolver import PythonResolver

__all__ = [
    'ResolverRegistry',
    'create_default_registries',
    'create_default_resolver_registry',
    'NodeResolver',
    'TsConfig',
    'TsConfigCache',
    'BuildSystem',
    'JvmResolver',
    'ProjectInfo',
    'ProjectInfoCache',
    'PythonResolver',
]
