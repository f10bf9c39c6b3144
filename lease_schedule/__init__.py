"""Core package for the Schedule of Notices of Leases parser service."""

__all__ = [
    "config",
    "models",
    "normalize",
    "template",
    "router",
    "parser",
    "compare",
    "client",
    "cache",
    "service",
    "cli",
]
