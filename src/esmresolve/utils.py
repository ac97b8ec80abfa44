"""Primitive classifiers and URL helpers shared by the resolver."""

from __future__ import annotations

import json
import os
import re
import shlex
import urllib.parse
import urllib.request
from typing import Any, Iterable, Optional, Union

from .constants import (
    Constants,
    ExperimentalFlags,
    FileFormat,
    NODE_BUILTINS,
    NODE_SCHEME_ONLY_BUILTINS,
)
from .errors import InvalidModuleSpecifierError


_SCHEME_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")

# Schemes that need something after the colon to form a URL.
_SPECIAL_SCHEMES = {"http", "https", "ws", "wss", "ftp"}

# Characters left as-is when turning a path into a file URL. A literal "%"
# is escaped as "%25".
_FILE_URL_SAFE = "/!$&'()*+,;=:@[]^|~"


def is_url(value: str) -> bool:
    """Check if the given string parses as an absolute URL."""
    match = _SCHEME_PATTERN.match(value)
    if not match:
        return False

    scheme = match.group(1).lower()
    if scheme in _SPECIAL_SCHEMES:
        return bool(value[match.end():].lstrip("/"))

    return True


def get_protocol(url: str) -> str:
    """Get the protocol of a URL, lower-cased and including the colon.

    Assumes ``url`` is valid, see :func:`is_url`.
    """
    match = _SCHEME_PATTERN.match(url)
    if not match:
        raise ValueError(f"Not an absolute URL: {url}")
    return f"{match.group(1).lower()}:"


def is_path(value: str) -> bool:
    """Check if the given string is a path, starting with `/`, `./`, or `../`."""
    return value.startswith(("/", "./", "../"))


def parse_json(value: str) -> Any:
    """Parse a JSON string, returning None if it is not valid JSON."""
    try:
        return json.loads(value)
    except (json.JSONDecodeError, TypeError):
        return None


def is_object(value: Any) -> bool:
    """Check if a value is a JSON object (and not an array or null)."""
    return isinstance(value, dict)


def is_relative_exports(exports: Any) -> bool:
    """Check if an exports value is a subpath map, i.e. every key starts with "."."""
    return is_object(exports) and all(key.startswith(".") for key in exports)


def is_defined(value: Any) -> bool:
    """Check if the given value is not None."""
    return value is not None


def get_character_count(value: str, character: str) -> int:
    return value.count(character)


def is_flag_enabled(
    flag: Union[ExperimentalFlags, str],
    exec_argv: Optional[Iterable[str]] = None,
) -> bool:
    """Check if a Node.js command line flag is enabled.

    Args:
        flag: The flag to check.
        exec_argv: The argument list to look in. Defaults to the flags in the
            ``NODE_OPTIONS`` environment variable.

    Returns:
        True if the flag is present.
    """
    flag_value = flag.value if isinstance(flag, ExperimentalFlags) else flag
    if exec_argv is None:
        exec_argv = shlex.split(os.environ.get(Constants.ENV_NODE_OPTIONS, ""))
    return flag_value in exec_argv


def is_builtin(specifier: str) -> bool:
    """Check if a specifier names a Node.js core module."""
    if specifier.startswith(Constants.NODE_PROTOCOL):
        name = specifier[len(Constants.NODE_PROTOCOL):]
        return name in NODE_BUILTINS or name in NODE_SCHEME_ONLY_BUILTINS
    return specifier in NODE_BUILTINS


def get_data_url_mime_type(url: str) -> str:
    """Get the MIME type of a `data:` URL, without any parameters.

    For example ``text/javascript`` for ``data:text/javascript,export {}``
    and ``application/wasm`` for ``data:application/wasm;base64,AGFz...``.

    Raises:
        InvalidModuleSpecifierError: If the URL has no MIME type.
    """
    parts = url.split(":")
    mime_type = parts[1].split(",")[0].split(";")[0].strip() if len(parts) > 1 else ""
    if not mime_type:
        raise InvalidModuleSpecifierError(url)

    return mime_type.lower()


def get_data_url_type(url: str) -> FileFormat:
    """Get the module format of a `data:` URL.

    Raises:
        InvalidModuleSpecifierError: If the MIME type is missing or unsupported.
    """
    mime_type = get_data_url_mime_type(url)
    file_format = Constants.DATA_URL_FORMATS.get(mime_type)
    if file_format is None:
        raise InvalidModuleSpecifierError(url)

    return file_format


def path_to_file_url(path: str) -> str:
    """Convert an absolute file system path to a `file:` URL."""
    absolute = os.path.abspath(path)
    if os.sep != "/":
        absolute = absolute.replace(os.sep, "/")
    if not absolute.startswith("/"):
        absolute = f"/{absolute}"
    return f"file://{urllib.parse.quote(absolute, safe=_FILE_URL_SAFE)}"


def directory_to_file_url(path: str) -> str:
    """Convert a directory path to a `file:` URL ending in "/"."""
    url = path_to_file_url(path)
    return url if url.endswith("/") else f"{url}/"


def file_url_to_path(url: str) -> str:
    """Convert a `file:` URL to a file system path.

    Raises:
        ValueError: If the URL is not a local `file:` URL.
    """
    parts = urllib.parse.urlsplit(url)
    if parts.scheme.lower() != "file":
        raise ValueError(f"The URL must be of scheme file: {url}")
    if parts.netloc not in ("", "localhost"):
        raise ValueError(f"File URL host must be \"localhost\" or empty: {url}")
    if not parts.path.startswith("/"):
        raise ValueError(f"File URL path must be absolute: {url}")
    return urllib.request.url2pathname(parts.path)


def normalize_file_url(url: str) -> str:
    """Give a `file:` URL an empty host and an absolute path.

    ``file:foo.js`` and ``file:/foo.js`` both become ``file:///foo.js``.
    Other URLs are returned unchanged.
    """
    parts = urllib.parse.urlsplit(url)
    if parts.scheme.lower() != "file":
        return url

    rest = url[len(parts.scheme) + 1:]
    if rest.startswith("//") and parts.path.startswith("/"):
        return url

    path = parts.path if parts.path.startswith("/") else f"/{parts.path}"
    normalized = f"file://{parts.netloc}{path}"
    if parts.query:
        normalized = f"{normalized}?{parts.query}"
    if parts.fragment:
        normalized = f"{normalized}#{parts.fragment}"
    return normalized


def join_url(base: str, reference: str) -> str:
    """Resolve ``reference`` against ``base`` like the WHATWG URL parser."""
    if is_url(reference):
        return reference
    return urllib.parse.urljoin(base, reference)


def to_url(value: str, base: str) -> str:
    """Turn a resolver result (URL or absolute path) into a URL string."""
    if os.path.isabs(value):
        return path_to_file_url(value)
    return join_url(base, value)
