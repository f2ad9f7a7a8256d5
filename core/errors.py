# core/errors.py

from core.logging_config import logger


class UpstreamFailure(Exception):
    """
    Raised when the Supabase collaborator fails (network, query error,
    missing configuration).

    Never interpreted as an empty result or an implicit allow: callers
    let it propagate to the HTTP boundary, which answers 500.
    """

    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation}: {detail}" if detail else operation)


class InvalidPermissionWrite(ValueError):
    """A profile permission write whose flags are not self-consistent."""


def extract_supabase_error(error: Exception) -> str:
    """Readable detail from a PostgREST / GoTrue error or any other exception."""
    message = getattr(error, "message", None)
    if message:
        return str(message)

    if error.args:
        return str(error.args[0])

    return str(error) or type(error).__name__


def upstream_failure(error: Exception, operation: str = "Supabase operation") -> UpstreamFailure:
    """
    Wrap a Supabase client error into an UpstreamFailure.
    Returns (doesn't raise) so the caller can `raise ... from error`.
    """
    detail = extract_supabase_error(error)
    logger.error(f"{operation}: {detail}")
    return UpstreamFailure(operation, detail)
