__version__ = "0.1.0"

__all__ = [
    "__version__",
    "audit",
    "cli",
    "config",
    "core",
    "dep3",
    "errors",
    "exit_codes",
    "io",
    "logging",
]
