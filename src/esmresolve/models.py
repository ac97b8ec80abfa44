"""Data models for package manifests and resolution results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .constants import FileFormat


# A single exports/imports target: a string, a list of alternative targets,
# a condition map, or null to exclude a condition.
PackageTarget = Union[str, List[Any], Dict[str, Any], None]

# The value of the "exports" field.
PackageExports = Union[str, List[Any], Dict[str, Any]]

# The value of the "imports" field.
PackageImports = Dict[str, Any]


def is_truthy(value: Any) -> bool:
    """Return True when a JSON value is truthy under JavaScript semantics.

    Empty lists and objects are truthy in JavaScript, unlike in Python.
    """
    if value is None or value is False:
        return False
    if isinstance(value, (list, dict)):
        return True
    if isinstance(value, (int, float)):
        return value != 0 and value == value  # NaN is falsy
    return bool(value)


@dataclass(frozen=True)
class PackageJson:
    """Sparse projection of a `package.json` with the fields resolution reads."""

    name: Optional[str] = None
    type: Optional[str] = None
    main: Optional[str] = None
    exports: Any = None
    imports: Any = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PackageJson":
        """Build a manifest from parsed JSON, ignoring unrelated fields."""
        name = data.get("name")
        package_type = data.get("type")
        main = data.get("main")
        return cls(
            name=name if isinstance(name, str) else None,
            type=package_type if package_type in ("module", "commonjs") else None,
            main=main if isinstance(main, str) and main else None,
            exports=data.get("exports"),
            imports=data.get("imports"),
        )

    @property
    def has_exports(self) -> bool:
        return is_truthy(self.exports)

    @property
    def format(self) -> Optional[FileFormat]:
        """The format implied by the "type" field, if declared."""
        if self.type is None:
            return None
        return FileFormat(self.type)


@dataclass(frozen=True)
class PackageSpecifier:
    """A bare package specifier split into package name and subpath."""

    name: str
    subpath: str


@dataclass(frozen=True)
class Resolution:
    """Resolution outcome: an absolute path (or URL) and its module format.

    A ``format`` of None means the specifier resolved but its format could
    not be determined, e.g. for an unknown URL scheme.
    """

    path: str
    format: Optional[FileFormat]

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "path": self.path,
            "format": self.format.value if self.format is not None else None,
        }
