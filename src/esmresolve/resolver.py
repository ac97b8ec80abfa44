"""Node.js module resolution.

Implements the ESM resolution algorithm from
https://nodejs.org/api/esm.html#resolution-algorithm-specification on top of
a pluggable file system. Given a specifier and the URL of the importing
module it returns the resolved file path (or URL) and the module format.

Failures raise one of the errors in ``esmresolve.errors``. Inside the
algorithm, None means "no result, keep trying" (the next condition, array
element or pattern) while an exception aborts the whole resolution.
"""

from __future__ import annotations

import functools
import logging
import os
import posixpath
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from .cache import ResolutionCache
from .common.logging_utils import Timer, extra_context, is_debug_enabled
from .constants import Constants, ExperimentalFlags, FileFormat
from .errors import (
    InvalidModuleSpecifierError,
    InvalidPackageConfigurationError,
    InvalidPackageTargetError,
    ModuleNotFoundError,
    PackageImportNotDefinedError,
    PackagePathNotExportedError,
    ResolverError,
    UnsupportedDirectoryImportError,
)
from .file_system import DEFAULT_FILE_SYSTEM, FileSystemInterface
from .models import PackageJson, PackageSpecifier, PackageTarget, Resolution, is_truthy
from .utils import (
    directory_to_file_url,
    file_url_to_path,
    get_character_count,
    get_data_url_type,
    get_protocol,
    is_builtin,
    is_flag_enabled,
    is_object,
    is_path,
    is_relative_exports,
    is_url,
    join_url,
    normalize_file_url,
    parse_json,
    path_to_file_url,
    to_url,
)
from .validation import is_valid_path, validate_exports_object, validate_pattern_key

logger = logging.getLogger(__name__)

ParentUrl = Union[str, "os.PathLike[str]"]


def compare_pattern_keys(key_a: str, key_b: str) -> int:
    """Order two pattern keys by descending specificity (PATTERN_KEY_COMPARE).

    Usable with ``functools.cmp_to_key``. Keys ending in "/" are still
    handled even though current Node.js versions no longer accept them.

    Returns:
        -1 if ``key_a`` sorts first, 1 if ``key_b`` sorts first, else 0.
    """
    validate_pattern_key(key_a)
    validate_pattern_key(key_b)

    base_length_a = key_a.index("*") + 1 if "*" in key_a else len(key_a)
    base_length_b = key_b.index("*") + 1 if "*" in key_b else len(key_b)

    if base_length_a > base_length_b:
        return -1
    if base_length_b > base_length_a:
        return 1

    if "*" not in key_a:
        return 1
    if "*" not in key_b:
        return -1

    if len(key_a) > len(key_b):
        return -1
    if len(key_b) > len(key_a):
        return 1

    return 0


def parse_package_specifier(specifier: str) -> PackageSpecifier:
    """Split a bare specifier into package name and subpath.

    ``@scope/pkg/sub`` becomes ``@scope/pkg`` and ``./sub``; ``pkg`` becomes
    ``pkg`` and ``.``.

    Raises:
        InvalidModuleSpecifierError: If the name or subpath is invalid.
    """
    if specifier == "":
        raise InvalidModuleSpecifierError(specifier)

    if specifier.startswith("@"):
        parts = specifier.split("/")
        if len(parts) < 2 or not parts[0] or not parts[1]:
            raise InvalidModuleSpecifierError(specifier)
        name = f"{parts[0]}/{parts[1]}"
    else:
        name = specifier.split("/")[0]

    if name.startswith(".") or "\\" in name or "%" in name:
        raise InvalidModuleSpecifierError(specifier)

    subpath = f".{specifier[len(name):]}"
    if subpath.endswith("/"):
        raise InvalidModuleSpecifierError(specifier)

    return PackageSpecifier(name=name, subpath=subpath)


def normalize_parent_url(parent_url: ParentUrl) -> str:
    """Return the parent as a URL string, converting plain paths to `file:` URLs.

    A path ending in a separator is treated as a directory.
    """
    parent = os.fspath(parent_url) if isinstance(parent_url, os.PathLike) else str(parent_url)
    if not os.path.isabs(parent) and is_url(parent):
        return normalize_file_url(parent)
    if parent.endswith(("/", os.sep)):
        return directory_to_file_url(parent)
    return path_to_file_url(parent)


def _is_root(path: str) -> bool:
    return os.path.dirname(path) == path


class Resolver:
    """Resolves module specifiers against a file system.

    Args:
        file_system: File system used for every disk access.
        conditions: Conditions matched (besides "default") in conditional
            exports and imports.
        exec_argv: Node.js flags considered enabled. None reads them from
            ``NODE_OPTIONS`` on every check.
        cache: Result cache. Pass the same instance to several resolvers to
            share results; a new empty cache is used if omitted.
    """

    def __init__(
        self,
        file_system: Optional[FileSystemInterface] = None,
        conditions: Optional[Sequence[str]] = None,
        exec_argv: Optional[Iterable[str]] = None,
        cache: Optional[ResolutionCache] = None,
    ):
        self.file_system = file_system if file_system is not None else DEFAULT_FILE_SYSTEM
        self.conditions: List[str] = list(
            conditions if conditions is not None else Constants.DEFAULT_CONDITIONS
        )
        self.exec_argv = list(exec_argv) if exec_argv is not None else None
        self.cache = cache if cache is not None else ResolutionCache()

    # =========================================================================
    # Entry point
    # =========================================================================

    def resolve(
        self,
        specifier: str,
        parent_url: ParentUrl,
        enable_cache: bool = True,
    ) -> Resolution:
        """Resolve a specifier to a file path (or URL) and module format.

        Args:
            specifier: The specifier as written in the importing module.
            parent_url: URL (or absolute path) of the importing module.
            enable_cache: Look up and store the result in the cache. A cached
                result is returned as-is, without touching the file system.

        Returns:
            The resolution.

        Raises:
            ResolverError: One of its subclasses, when resolution fails.
        """
        parent = normalize_parent_url(parent_url)

        if enable_cache:
            cached = self.cache.get(specifier, parent)
            if cached is not None:
                if is_debug_enabled(logger):
                    logger.debug(
                        "Resolution cache hit",
                        extra=extra_context(
                            event="cache_hit",
                            component="resolver",
                            specifier=specifier,
                            parent=parent,
                        ),
                    )
                return cached

        with Timer() as t:
            try:
                result = self._resolve_uncached(specifier, parent)
            except ResolverError as exc:
                if is_debug_enabled(logger):
                    logger.debug(
                        "Resolution failed: %s",
                        exc,
                        extra=extra_context(
                            event="resolve",
                            component="resolver",
                            outcome="error",
                            error=type(exc).__name__,
                            specifier=specifier,
                            parent=parent,
                        ),
                    )
                raise

        if is_debug_enabled(logger):
            logger.debug(
                "Resolved %s to %s",
                specifier,
                result.path,
                extra=extra_context(
                    event="resolve",
                    component="resolver",
                    outcome="success",
                    specifier=specifier,
                    parent=parent,
                    target=result.path,
                    duration_ms=t.duration_ms(),
                ),
            )

        if enable_cache:
            result = self.cache.set(specifier, parent, result)
            if is_debug_enabled(logger):
                logger.debug(
                    "Stored resolution of %s in cache",
                    specifier,
                    extra=extra_context(
                        event="cache_store",
                        component="resolver",
                        specifier=specifier,
                        parent=parent,
                    ),
                )

        return result

    def _resolve_uncached(self, specifier: str, parent_url: str) -> Resolution:
        resolved = self.get_resolved_url(specifier, parent_url)

        # The resolved specifier must not contain encoded "/" or "\".
        lowered = resolved.lower()
        if any(encoded in lowered for encoded in Constants.ENCODED_SEPARATORS):
            raise InvalidModuleSpecifierError(resolved)

        protocol = get_protocol(resolved)

        # https://nodejs.org/api/esm.html#file-urls
        if protocol == Constants.FILE_PROTOCOL:
            path = file_url_to_path(resolved)
            if self.file_system.is_directory(path):
                raise UnsupportedDirectoryImportError(resolved)
            if not self.file_system.is_file(path):
                raise ModuleNotFoundError(resolved)
            return Resolution(path=path, format=self.get_package_format(path))

        # https://nodejs.org/api/esm.html#node-imports
        if protocol == Constants.NODE_PROTOCOL:
            return Resolution(path=resolved, format=FileFormat.BUILTIN)

        # https://nodejs.org/api/esm.html#data-imports
        if protocol == Constants.DATA_PROTOCOL:
            return Resolution(path=resolved, format=get_data_url_type(resolved))

        return Resolution(path=resolved, format=None)

    def get_resolved_url(self, specifier: str, parent_url: str) -> str:
        """Turn a specifier into an absolute URL without classifying it."""
        if is_url(specifier):
            return normalize_file_url(specifier)

        if is_path(specifier):
            return join_url(parent_url, specifier)

        if specifier.startswith("#"):
            return to_url(self.resolve_package_imports(specifier, parent_url), parent_url)

        return to_url(self.resolve_package(specifier, parent_url), parent_url)

    # =========================================================================
    # Packages (PACKAGE_RESOLVE)
    # =========================================================================

    def resolve_package(self, specifier: str, parent_url: str) -> str:
        """Resolve a bare specifier to a `file:` or `node:` URL.

        Raises:
            InvalidModuleSpecifierError: If the specifier is malformed.
            ModuleNotFoundError: If no `node_modules` entry is found.
        """
        if specifier == "":
            raise InvalidModuleSpecifierError(specifier)

        if is_builtin(specifier):
            return f"{Constants.NODE_PROTOCOL}{specifier}"

        package = parse_package_specifier(specifier)

        self_resolved = self.resolve_self(package.name, package.subpath, parent_url)
        if self_resolved is not None:
            return self_resolved

        return self.resolve_package_from_node_modules(
            package.name, package.subpath, parent_url
        )

    def resolve_self(
        self, package_name: str, package_subpath: str, parent_url: str
    ) -> Optional[str]:
        """Resolve a package importing itself by name (PACKAGE_SELF_RESOLVE).

        Returns None when the enclosing package has no exports or a
        different name.
        """
        package_path = self.get_package_scope(parent_url)
        if package_path is None:
            return None

        package_json = self.get_package_json(package_path)
        if package_json is None or not package_json.has_exports:
            return None

        if package_json.name == package_name:
            return self.resolve_package_exports(
                package_path, package_subpath, package_json.exports
            )

        return None

    def resolve_package_from_node_modules(
        self, package_name: str, package_subpath: str, parent_url: str
    ) -> str:
        """Look for the package in `node_modules`, walking up from the parent.

        Directories without a `package.json` are skipped. The file system
        root itself is not searched.

        Raises:
            ModuleNotFoundError: If the package is not found.
        """
        try:
            current: Optional[str] = os.path.normpath(file_url_to_path(parent_url))
        except ValueError:
            current = None

        while current is not None and not _is_root(current):
            package_path = os.path.normpath(
                os.path.join(current, Constants.NODE_MODULES_DIR, package_name)
            )

            if self.file_system.is_directory(package_path):
                package_json = self.get_package_json(package_path)
                if package_json is not None:
                    if is_debug_enabled(logger):
                        logger.debug(
                            "Found package %s",
                            package_name,
                            extra=extra_context(
                                event="package_found",
                                component="resolver",
                                package=package_name,
                                path=package_path,
                            ),
                        )

                    if package_json.has_exports:
                        return self.resolve_package_exports(
                            package_path, package_subpath, package_json.exports
                        )

                    package_url = directory_to_file_url(package_path)
                    if package_subpath == "." and package_json.main:
                        return join_url(package_url, package_json.main)

                    return join_url(package_url, package_subpath)

            current = os.path.dirname(current)

        raise ModuleNotFoundError(
            posixpath.normpath(posixpath.join(package_name, package_subpath))
        )

    # =========================================================================
    # Imports (PACKAGE_IMPORTS_RESOLVE)
    # =========================================================================

    def resolve_package_imports(self, specifier: str, parent_url: str) -> str:
        """Resolve a `#` specifier through the enclosing package's imports.

        Raises:
            InvalidModuleSpecifierError: For "#" or specifiers starting "#/".
            PackageImportNotDefinedError: If no import entry matches.
        """
        assert specifier.startswith("#")

        if specifier == "#" or specifier.startswith("#/"):
            raise InvalidModuleSpecifierError(specifier)

        package_path = self.get_package_scope(parent_url)
        if package_path is not None:
            package_json = self.get_package_json(package_path)
            if package_json is not None and is_object(package_json.imports):
                resolved = self.resolve_package_imports_exports(
                    specifier, package_json.imports, package_path, True
                )
                if resolved is not None:
                    return resolved

        raise PackageImportNotDefinedError(specifier)

    # =========================================================================
    # Exports (PACKAGE_EXPORTS_RESOLVE)
    # =========================================================================

    def resolve_package_exports(
        self, package_path: str, package_subpath: str, exports: Any
    ) -> str:
        """Resolve a subpath ("." or "./...") through a package's exports.

        Raises:
            InvalidPackageConfigurationError: If the exports object is malformed.
            PackagePathNotExportedError: If no defined target matches.
        """
        if is_object(exports):
            validate_exports_object(package_path, exports)

        if package_subpath == ".":
            main_export = None
            if isinstance(exports, (str, list)) or not is_relative_exports(exports):
                main_export = exports
            if is_relative_exports(exports):
                main_export = exports.get(".")

            if is_truthy(main_export):
                resolved = self.resolve_package_target(package_path, main_export, None, False)
                if resolved is not None:
                    return resolved

        elif is_relative_exports(exports):
            assert package_subpath.startswith("./")
            resolved = self.resolve_package_imports_exports(
                package_subpath, exports, package_path, False
            )
            if resolved is not None:
                return resolved

        raise PackagePathNotExportedError(package_subpath)

    def resolve_package_imports_exports(
        self,
        match_key: str,
        match_object: Dict[str, Any],
        package_path: str,
        is_imports: bool,
    ) -> Optional[str]:
        """Match a key against an exports subpath map or imports map.

        An exact key without "*" wins outright. Otherwise keys with a single
        "*" are tried from most to least specific, and the first pattern
        that matches decides the result.
        """
        if match_key in match_object and "*" not in match_key:
            return self.resolve_package_target(
                package_path, match_object[match_key], None, is_imports
            )

        expansion_keys = sorted(
            (key for key in match_object if get_character_count(key, "*") == 1),
            key=functools.cmp_to_key(compare_pattern_keys),
        )

        for expansion_key in expansion_keys:
            pattern_base, pattern_trailer = expansion_key.split("*")

            if not match_key.startswith(pattern_base) or match_key == pattern_base:
                continue

            if not pattern_trailer or (
                match_key.endswith(pattern_trailer)
                and len(match_key) >= len(expansion_key)
            ):
                pattern_match = match_key[len(pattern_base):len(match_key) - len(pattern_trailer)]
                return self.resolve_package_target(
                    package_path, match_object[expansion_key], pattern_match, is_imports
                )

        return None

    # =========================================================================
    # Targets (PACKAGE_TARGET_RESOLVE)
    # =========================================================================

    def resolve_package_target(
        self,
        package_path: str,
        target: PackageTarget,
        pattern_match: Optional[str],
        is_imports: bool,
    ) -> Optional[str]:
        """Resolve one exports/imports target value.

        Returns:
            The resolved URL, or None if the target deliberately yields
            nothing (null, unmatched conditions, exhausted array).

        Raises:
            InvalidPackageTargetError: If the target has an invalid type or
                string value.
        """
        if isinstance(target, str):
            return self._resolve_string_target(package_path, target, pattern_match, is_imports)

        if isinstance(target, dict):
            return self._resolve_object_target(package_path, target, pattern_match, is_imports)

        if isinstance(target, list):
            return self._resolve_array_target(package_path, target, pattern_match, is_imports)

        if target is None:
            return None

        raise InvalidPackageTargetError(package_path)

    def _resolve_string_target(
        self,
        package_path: str,
        target: str,
        pattern_match: Optional[str],
        is_imports: bool,
    ) -> str:
        if not target.startswith("./"):
            if (
                not is_imports
                or target.startswith(("../", "/"))
                or is_url(target)
            ):
                raise InvalidPackageTargetError(target)

            # Imports may map to another package, resolved from this one.
            package_url = directory_to_file_url(package_path)
            if pattern_match is not None:
                return self.resolve_package(target.replace("*", pattern_match), package_url)
            return self.resolve_package(target, package_url)

        if not is_valid_path(target[2:]):
            raise InvalidPackageTargetError(target)

        # Targets are URL references: percent escapes in them stay escaped.
        package_url = directory_to_file_url(package_path)
        resolved_target = join_url(package_url, target)
        assert resolved_target.startswith(package_url), (
            f"{resolved_target} is outside of {package_url}"
        )

        if pattern_match is None:
            return resolved_target

        if not is_valid_path(pattern_match):
            raise InvalidModuleSpecifierError(pattern_match)

        return join_url(package_url, target.replace("*", pattern_match))

    def _resolve_object_target(
        self,
        package_path: str,
        target: Dict[str, Any],
        pattern_match: Optional[str],
        is_imports: bool,
    ) -> Optional[str]:
        validate_exports_object(package_path, target)

        # Declaration order decides, not the order of self.conditions.
        for key, value in target.items():
            if key != Constants.DEFAULT_CONDITION and key not in self.conditions:
                continue

            resolved = self.resolve_package_target(package_path, value, pattern_match, is_imports)
            if resolved is not None:
                return resolved

        return None

    def _resolve_array_target(
        self,
        package_path: str,
        target: List[Any],
        pattern_match: Optional[str],
        is_imports: bool,
    ) -> Optional[str]:
        last_index = len(target) - 1

        for index, value in enumerate(target):
            try:
                resolved = self.resolve_package_target(
                    package_path, value, pattern_match, is_imports
                )
            except InvalidPackageTargetError:
                # An invalid fallback is skipped unless it is the last one.
                if index < last_index:
                    continue
                raise

            if resolved is not None:
                return resolved

        return None

    # =========================================================================
    # Package scope and manifest
    # =========================================================================

    def get_package_scope(self, url: str) -> Optional[str]:
        """Find the directory of the nearest `package.json` above ``url``.

        Returns None for non-`file:` URLs, when no manifest is found, or when
        the walk reaches a `node_modules` directory first.
        """
        try:
            path = file_url_to_path(url)
        except ValueError:
            return None

        # A directory URL is its own first candidate.
        if url.endswith("/"):
            path = os.path.join(path, Constants.PACKAGE_JSON_FILE)

        return self._find_package_scope(path)

    def _find_package_scope(self, path: str) -> Optional[str]:
        scope = os.path.normpath(path)

        while not _is_root(scope):
            scope = os.path.dirname(scope)

            if os.path.basename(scope) == Constants.NODE_MODULES_DIR:
                return None

            if self.file_system.is_file(os.path.join(scope, Constants.PACKAGE_JSON_FILE)):
                if is_debug_enabled(logger):
                    logger.debug(
                        "Package scope for %s is %s",
                        path,
                        scope,
                        extra=extra_context(
                            event="package_scope",
                            component="resolver",
                            path=scope,
                        ),
                    )
                return scope

        return None

    def get_package_json(self, package_path: Optional[str]) -> Optional[PackageJson]:
        """Read the `package.json` in ``package_path``.

        Returns:
            The manifest, or None if the directory has none.

        Raises:
            InvalidPackageConfigurationError: If the file is not a JSON object.
        """
        if not package_path:
            return None

        package_json_path = os.path.join(package_path, Constants.PACKAGE_JSON_FILE)
        if not self.file_system.is_file(package_json_path):
            return None

        try:
            content = self.file_system.read_file(package_json_path)
        except UnicodeDecodeError as exc:
            raise InvalidPackageConfigurationError(package_path) from exc

        data = parse_json(content)
        if not isinstance(data, dict):
            raise InvalidPackageConfigurationError(package_path)

        return PackageJson.from_dict(data)

    # =========================================================================
    # Format (ESM_FILE_FORMAT)
    # =========================================================================

    def is_flag_enabled(self, flag: ExperimentalFlags) -> bool:
        return is_flag_enabled(flag, self.exec_argv)

    def get_package_format(self, path: str) -> Optional[FileFormat]:
        """Classify an existing file by extension and enclosing package type.

        Returns:
            The format, or None if it cannot be determined.
        """
        assert self.file_system.is_file(path)

        if path.endswith(".mjs"):
            return FileFormat.MODULE
        if path.endswith(".cjs"):
            return FileFormat.COMMONJS
        if path.endswith(".json"):
            return FileFormat.JSON
        if path.endswith(".wasm") and self.is_flag_enabled(ExperimentalFlags.WASM_MODULES):
            return FileFormat.WASM

        package_json = self.get_package_json(self._find_package_scope(path))
        package_type = package_json.format if package_json is not None else None

        if path.endswith(".js"):
            return package_type if package_type is not None else FileFormat.COMMONJS

        if os.path.splitext(path)[1] == "":
            if self.is_flag_enabled(ExperimentalFlags.WASM_MODULES):
                header = self.file_system.read_bytes(path, len(Constants.WASM_MAGIC_BYTES))
                if header == Constants.WASM_MAGIC_BYTES:
                    return FileFormat.WASM

            if package_type is not None:
                return package_type

        return None


# Process-wide cache backing the module level resolve().
DEFAULT_CACHE = ResolutionCache()


def resolve(
    specifier: str,
    parent_url: ParentUrl,
    file_system: Optional[FileSystemInterface] = None,
    enable_cache: bool = True,
) -> Resolution:
    """Resolve a specifier with the default conditions and process-wide cache.

    Args:
        specifier: The specifier to resolve.
        parent_url: URL (or absolute path) of the importing module.
        file_system: File system to use. Defaults to the real disk.
        enable_cache: Whether to use the process-wide cache.

    Returns:
        The resolved path and format.

    Raises:
        ResolverError: One of its subclasses, when resolution fails.
    """
    resolver = Resolver(file_system=file_system, cache=DEFAULT_CACHE)
    return resolver.resolve(specifier, parent_url, enable_cache)
