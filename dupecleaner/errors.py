"""
Error types raised by the cleaner.

GatewayError and its subclasses come from talking to the remote service;
callers decide per scope (run, group, asset, album) whether they are fatal.
"""


class CleanerError(Exception):
    """Base class for all errors raised by dupecleaner."""


class ConfigError(CleanerError):
    """Missing or invalid settings. Fatal to the whole run."""


class GatewayError(CleanerError):
    """Any failure talking to the remote service."""


class TransportError(GatewayError):
    """Network or connection failure (including timeouts)."""


class UnexpectedStatus(GatewayError):
    """The service answered with a status code the call doesn't accept."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {body}")


class DecodeError(GatewayError):
    """The response body could not be decoded into the expected shape."""


class SelectionError(CleanerError):
    """The quality ranker found no eligible candidate. Aborts only the current group."""
