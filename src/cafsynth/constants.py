"""Shared constants for cafsynth.

Single source of truth for defaults used by configuration, the metadata
model and the synthesis strategies. Kept free of intra-package imports so
every layer can depend on it.

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Naming
    "DEFAULT_VARIABLE_PREFIX",
    "MODULE_SEPARATOR",
    # Depth limits
    "MAX_DEPTH",
    # Value bounds
    "INT32_MIN",
    "INT32_MAX",
    # Targets
    "NODE_BUILTIN_MODULES",
    "CHROME_OPEN_DIRECTIVE",
    "CHROME_CLOSE_DIRECTIVE",
]

# ============================================================================
# NAMING
# ============================================================================

DEFAULT_VARIABLE_PREFIX: str = "v"
"""Prefix of generated variable names: v0, v1, v2, ..."""

MODULE_SEPARATOR: str = "."
"""Separator between the module segment and the member path of an export name."""

# ============================================================================
# DEPTH LIMITS
# ============================================================================

MAX_DEPTH: int = 100
"""Maximum array nesting depth accepted by the synthesis engine.

Array synthesis recurses once per nesting level. Test cases coming from a
mutator can be arbitrarily deep, so the engine refuses graphs deeper than
this instead of hitting Python's recursion limit.
"""

# ============================================================================
# VALUE BOUNDS
# ============================================================================

INT32_MIN: int = -(2**31)
INT32_MAX: int = 2**31 - 1

# ============================================================================
# TARGETS
# ============================================================================

NODE_BUILTIN_MODULES: frozenset[str] = frozenset({
    "assert",
    "async_hooks",
    "buffer",
    "child_process",
    "cluster",
    "console",
    "crypto",
    "dgram",
    "diagnostics_channel",
    "dns",
    "domain",
    "events",
    "fs",
    "http",
    "http2",
    "https",
    "inspector",
    "module",
    "net",
    "os",
    "path",
    "perf_hooks",
    "process",
    "punycode",
    "querystring",
    "readline",
    "repl",
    "stream",
    "string_decoder",
    "timers",
    "tls",
    "trace_events",
    "tty",
    "url",
    "util",
    "v8",
    "vm",
    "wasi",
    "worker_threads",
    "zlib",
})
"""Node.js built-in modules that are imported on first use."""

CHROME_OPEN_DIRECTIVE: str = ".open about:blank"
"""First line of a Chrome program: navigate the headless browser host."""

CHROME_CLOSE_DIRECTIVE: str = "close();"
"""Last line of a Chrome program: close the page so the host exits."""
