from __future__ import annotations


class GovanityError(Exception):
    """Base class for fatal errors reported by the CLI."""


class ConfigError(GovanityError):
    pass


class ListenerError(GovanityError):
    pass


class ServerError(GovanityError):
    pass
