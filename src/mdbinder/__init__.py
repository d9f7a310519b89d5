"""mdbinder: bind the README-reachable docs of many repositories into one book."""

__version__ = "0.1.0"
