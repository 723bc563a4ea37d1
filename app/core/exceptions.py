"""Error types raised below the router layer.

Routers catch these (and anything else) at the endpoint boundary and turn
them into the standard ``{"success": false, "error": ...}`` envelope.
"""


class ConfigurationError(RuntimeError):
    """Required Notion credentials or identifiers are missing."""


class FetchError(RuntimeError):
    """A request to the Notion API failed.

    ``status_code`` is set when Notion answered with an HTTP error status,
    and left as ``None`` for transport failures (DNS, connection reset, ...).
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
