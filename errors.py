"""
Exceptions raised by the marketplace and the Flask handler that renders them.
"""

import logging
from flask import jsonify

logger = logging.getLogger(__name__)


class MarketplaceError(Exception):
    """Base exception for request-level errors."""
    status_code = 500

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors or []


class ValidationError(MarketplaceError):
    """Raised when submitted data fails validation."""
    status_code = 400


class AuthenticationFailed(MarketplaceError):
    """Raised when credentials are wrong or no user is logged in."""
    status_code = 401


class PermissionDenied(MarketplaceError):
    """Raised when the current user may not act on a resource."""
    status_code = 403


class NotFound(MarketplaceError):
    """Raised when a profile, campaign or conversation does not exist."""
    status_code = 404


class InvalidTransition(MarketplaceError):
    """Raised when a campaign or request cannot move to the asked status."""
    status_code = 409


def handle_marketplace_error(exc):
    """Render a MarketplaceError as a JSON error body."""
    if exc.status_code >= 500:
        logger.error(f"Unhandled marketplace error: {exc}", exc_info=True)
    else:
        logger.warning(f"{exc.__class__.__name__}: {exc}")

    body = {
        'success': False,
        'error': str(exc),
        'type': exc.__class__.__name__
    }
    if exc.errors:
        body['errors'] = exc.errors

    return jsonify(body), exc.status_code


def register_error_handlers(app):
    app.register_error_handler(MarketplaceError, handle_marketplace_error)
