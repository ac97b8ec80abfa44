"""Errors raised by the resolver.

One exception type exists per failure mode of the Node.js resolution
algorithm. Every error keeps the offending value as an attribute so callers
can decide whether to abort a build or leave the specifier untouched.
"""

from __future__ import annotations

import builtins


class ResolverError(Exception):
    """Base class for all resolution failures."""


class InvalidModuleSpecifierError(ResolverError):
    """The module specifier is an invalid URL, package name or subpath."""

    def __init__(self, specifier: str):
        self.specifier = specifier
        super().__init__(
            "Module specifier is an invalid URL, package name or package "
            f'subpath specifier: "{specifier}".'
        )


class UnsupportedDirectoryImportError(ResolverError):
    """The resolved `file:` URL points at a directory."""

    def __init__(self, specifier: str):
        self.specifier = specifier
        super().__init__(
            "The resolved path corresponds to a directory, which is not a "
            f'supported target for module imports: "{specifier}".'
        )


class ModuleNotFoundError(ResolverError, builtins.ModuleNotFoundError):  # pylint: disable=redefined-builtin
    """The package or file does not exist.

    Also a subclass of the builtin ``ModuleNotFoundError``, so handlers
    written against either type catch it.
    """

    def __init__(self, specifier: str):
        self.specifier = specifier
        super().__init__(
            f'The package or module requested does not exist: "{specifier}".'
        )


class InvalidPackageConfigurationError(ResolverError):
    """A `package.json` is unparseable or its `exports` object is malformed."""

    def __init__(self, package_url: str):
        self.package_url = package_url
        super().__init__(
            "`package.json` configuration is invalid or contains an invalid "
            f'configuration: "{package_url}".'
        )


class InvalidPackageTargetError(ResolverError):
    """An exports or imports target has an invalid type or string value."""

    def __init__(self, target: str):
        self.target = target
        super().__init__(
            "Package exports or imports define a target module for the "
            "package that is an invalid type or string target: "
            f'"{target}".'
        )


class PackagePathNotExportedError(ResolverError):
    """The package's exports do not define the requested subpath."""

    def __init__(self, subpath: str):
        self.subpath = subpath
        super().__init__(
            "Package exports do not define or permit a target subpath in the "
            f'package for the given module: "{subpath}".'
        )


class PackageImportNotDefinedError(ResolverError):
    """No enclosing `imports` map defines the `#` specifier."""

    def __init__(self, specifier: str):
        self.specifier = specifier
        super().__init__(
            f'Package imports do not define the specifier: "{specifier}".'
        )
