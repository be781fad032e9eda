"""Error taxonomy and handling helpers for the price relay."""
from typing import Any, Dict, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Error fetching data"


class PriceRelayError(Exception):
    """Base class for all errors raised by the relay."""


class InputValidationError(PriceRelayError):
    """A required request input is missing or empty."""


class UpstreamError(PriceRelayError):
    """One of the upstream GraphQL services failed or returned an unusable body."""

    def __init__(self, message: str, *, operation: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code


class ComputationError(PriceRelayError):
    """Prices inside a window could not be turned into aggregates (decimal overflow and the like)."""


class ConfigurationError(PriceRelayError):
    """Credentials or endpoint URLs are missing."""


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Tuple[int, str]:
        """Log ``exc`` and return the ``(status_code, body)`` that is safe to send to the caller."""
        if isinstance(exc, InputValidationError):
            logger.info("Rejected request: %s", exc)
            return 400, str(exc)

        if isinstance(exc, UpstreamError):
            logger.error(
                "Upstream failure in %s (status=%s): %s context=%s",
                exc.operation or "unknown",
                exc.status_code,
                exc,
                context or {},
            )
        else:
            logger.error("Unhandled exception while fetching prices: %s context=%s", exc, context or {}, exc_info=True)
        return 500, GENERIC_ERROR_MESSAGE
