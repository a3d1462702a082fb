"""
Helpers that turn ledger errors into response envelopes.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from timeledger.domain.errors import InvalidInputError, LedgerError, StorageFailureError
from timeledger.domain.responses import ApiResponse, ApiStatusCode


def error_response(error: LedgerError, action: str, logger: logging.Logger,
                   status_code: Optional[ApiStatusCode] = None) -> ApiResponse:
    """
    Log a failed operation and wrap it in an envelope.

    Storage failures are logged with their traceback and reported as 500;
    rule violations are logged as warnings and carry their own status code
    unless the caller overrides it.
    """
    if isinstance(error, StorageFailureError):
        logger.error(f"Error while {action}: {error.message}", exc_info=error)
        return ApiResponse.error(error.status_code, f"An error occurred while {action}: {error.message}")

    logger.warning(f"Rejected while {action}: {error.message}")
    return ApiResponse.error(status_code or error.status_code, error.message)


def invalid_input(error: ValidationError) -> InvalidInputError:
    """Collapse a pydantic ValidationError into one InvalidInputError"""
    details = "; ".join(
        f"{'.'.join(str(p) for p in e['loc']) or 'request'}: {e['msg']}" for e in error.errors()
    )
    return InvalidInputError(f"Invalid request: {details}")
