"""Node.js ESM/CommonJS module resolution for build tooling.

Typical use::

    from esmresolve import resolve

    result = resolve("react", "file:///project/src/index.js")
    result.path, result.format
"""

from .cache import ResolutionCache
from .config import ResolverSettings, load_settings
from .constants import FileFormat
from .errors import (
    InvalidModuleSpecifierError,
    InvalidPackageConfigurationError,
    InvalidPackageTargetError,
    ModuleNotFoundError,  # pylint: disable=redefined-builtin
    PackageImportNotDefinedError,
    PackagePathNotExportedError,
    ResolverError,
    UnsupportedDirectoryImportError,
)
from .file_system import (
    DIRECTORY,
    DefaultFileSystem,
    FileSystemInterface,
    MemoryFileSystem,
)
from .models import PackageJson, Resolution
from .resolver import Resolver, compare_pattern_keys, resolve

__version__ = "0.1.0"

__all__ = [
    "DIRECTORY",
    "DefaultFileSystem",
    "FileFormat",
    "FileSystemInterface",
    "InvalidModuleSpecifierError",
    "InvalidPackageConfigurationError",
    "InvalidPackageTargetError",
    "MemoryFileSystem",
    "ModuleNotFoundError",
    "PackageImportNotDefinedError",
    "PackageJson",
    "PackagePathNotExportedError",
    "Resolution",
    "ResolutionCache",
    "Resolver",
    "ResolverError",
    "ResolverSettings",
    "UnsupportedDirectoryImportError",
    "compare_pattern_keys",
    "load_settings",
    "resolve",
]
