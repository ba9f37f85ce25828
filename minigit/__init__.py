"""A small Git implementation: loose objects, trees, commits, packfiles and HTTP cloning."""

__version__ = "0.1.0"

__all__ = [
    "checkout",
    "cli",
    "commands",
    "delta",
    "hashing",
    "objects",
    "pack",
    "pktline",
    "refs",
    "transport",
]