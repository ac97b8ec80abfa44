"""Tests for the resolver error types."""

import builtins

import pytest

from esmresolve import errors


class TestErrors:
    """Tests for messages and attributes of each error."""

    @pytest.mark.parametrize(
        "error_class, value, attribute, message",
        [
            (
                errors.InvalidModuleSpecifierError,
                "foo",
                "specifier",
                'Module specifier is an invalid URL, package name or package subpath specifier: "foo".',
            ),
            (
                errors.UnsupportedDirectoryImportError,
                "file:///foo",
                "specifier",
                "The resolved path corresponds to a directory, which is not a supported "
                'target for module imports: "file:///foo".',
            ),
            (
                errors.ModuleNotFoundError,
                "foo",
                "specifier",
                'The package or module requested does not exist: "foo".',
            ),
            (
                errors.InvalidPackageConfigurationError,
                "/foo",
                "package_url",
                "`package.json` configuration is invalid or contains an invalid "
                'configuration: "/foo".',
            ),
            (
                errors.InvalidPackageTargetError,
                "./foo",
                "target",
                "Package exports or imports define a target module for the package that "
                'is an invalid type or string target: "./foo".',
            ),
            (
                errors.PackagePathNotExportedError,
                "./foo",
                "subpath",
                "Package exports do not define or permit a target subpath in the package "
                'for the given module: "./foo".',
            ),
            (
                errors.PackageImportNotDefinedError,
                "#foo",
                "specifier",
                'Package imports do not define the specifier: "#foo".',
            ),
        ],
    )
    def test_error(self, error_class, value, attribute, message):
        """Test message text, attribute and base class."""
        error = error_class(value)
        assert str(error) == message
        assert getattr(error, attribute) == value
        assert isinstance(error, errors.ResolverError)

    def test_module_not_found_is_builtin_subclass(self):
        """Test that handlers for the builtin type also catch it."""
        with pytest.raises(builtins.ModuleNotFoundError):
            raise errors.ModuleNotFoundError("foo")
