class ResaleLedgerError(Exception):
    """Base class for errors surfaced to API callers."""


class ConfigurationError(ResaleLedgerError):
    """The backing database is unconfigured or cannot be reached."""


class QueryError(ResaleLedgerError):
    """A read or write against the backing database failed."""

    def __init__(self, action: str, detail: str = ""):
        self.action = action
        self.detail = detail
        message = f"Failed to {action}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


__all__ = ["ConfigurationError", "QueryError", "ResaleLedgerError"]
