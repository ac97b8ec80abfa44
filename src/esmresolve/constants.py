"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the command line front end.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    RESOLUTION_ERROR = 1
    USAGE_ERROR = 2


class FileFormat(Enum):
    """Module formats a resolved specifier can have.

    Args:
        Enum (string): Format names as reported by Node.js.
    """

    MODULE = "module"
    COMMONJS = "commonjs"
    JSON = "json"
    WASM = "wasm"
    BUILTIN = "builtin"


class ExperimentalFlags(Enum):
    """Node.js command line flags that change resolution behavior.

    Args:
        Enum (string): The flag as written on the command line.
    """

    WASM_MODULES = "--experimental-wasm-modules"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    # Conditions checked, in addition to "default", when evaluating
    # conditional exports and imports.
    DEFAULT_CONDITIONS = ["node", "import", "require"]
    DEFAULT_CONDITION = "default"

    PACKAGE_JSON_FILE = "package.json"
    NODE_MODULES_DIR = "node_modules"

    FILE_PROTOCOL = "file:"
    NODE_PROTOCOL = "node:"
    DATA_PROTOCOL = "data:"

    # WASM_BINARY_MAGIC = 0x0061736d
    WASM_MAGIC_BYTES = b"\x00asm"

    DATA_URL_FORMATS = {
        "text/javascript": FileFormat.MODULE,
        "application/json": FileFormat.JSON,
        "application/wasm": FileFormat.WASM,
    }

    # Encoded "/" and "\" are never allowed in a resolved specifier.
    ENCODED_SEPARATORS = ("%2f", "%5c")

    CACHE_KEY_SEPARATOR = "#"

    LOG_FORMAT = "[%(levelname)s] %(message)s"

    ENV_LOG_LEVEL = "ESMRESOLVE_LOG_LEVEL"
    ENV_CONFIG = "ESMRESOLVE_CONFIG"
    ENV_CONDITIONS = "ESMRESOLVE_CONDITIONS"
    ENV_EXPERIMENTAL_FLAGS = "ESMRESOLVE_EXPERIMENTAL_FLAGS"
    ENV_DISABLE_CACHE = "ESMRESOLVE_DISABLE_CACHE"
    ENV_NODE_OPTIONS = "NODE_OPTIONS"

    CONFIG_SECTION = "resolver"
    OUTPUT_FORMATS = ["json", "text"]


# Core modules importable without the "node:" prefix.
NODE_BUILTINS = frozenset({
    "_http_agent", "_http_client", "_http_common", "_http_incoming",
    "_http_outgoing", "_http_server", "_stream_duplex", "_stream_passthrough",
    "_stream_readable", "_stream_transform", "_stream_wrap", "_stream_writable",
    "_tls_common", "_tls_wrap",
    "assert", "assert/strict", "async_hooks", "buffer", "child_process",
    "cluster", "console", "constants", "crypto", "dgram",
    "diagnostics_channel", "dns", "dns/promises", "domain", "events", "fs",
    "fs/promises", "http", "http2", "https", "inspector",
    "inspector/promises", "module", "net", "os", "path", "path/posix",
    "path/win32", "perf_hooks", "process", "punycode", "querystring",
    "readline", "readline/promises", "repl", "stream", "stream/consumers",
    "stream/promises", "stream/web", "string_decoder", "sys", "timers",
    "timers/promises", "tls", "trace_events", "tty", "url", "util",
    "util/types", "v8", "vm", "wasi", "worker_threads", "zlib",
})

# Core modules that only exist behind the "node:" scheme.
NODE_SCHEME_ONLY_BUILTINS = frozenset({
    "sea", "sqlite", "test", "test/reporters",
})
