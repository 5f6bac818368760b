"""
Tests for logging setup and error rendering.
"""

import logging
import pytest
from logger import configure_logging, reset_logging, LOG_FORMAT
from errors import MarketplaceError, NotFound, ValidationError, handle_marketplace_error


class TestConfigureLogging:
    """Test root logger wiring."""

    @pytest.fixture(autouse=True)
    def _reset(self):
        level = logging.getLogger().level
        reset_logging()
        yield
        reset_logging()
        configure_logging(logging.getLevelName(level))

    def test_sets_level(self):
        root = configure_logging("DEBUG")
        assert root.level == logging.DEBUG

    def test_single_handler(self):
        before = len(logging.getLogger().handlers)
        configure_logging("INFO")
        configure_logging("WARNING")
        assert len(logging.getLogger().handlers) == before + 1
        assert logging.getLogger().level == logging.WARNING

    def test_handler_format(self):
        configure_logging("INFO")
        formatters = [h.formatter for h in logging.getLogger().handlers if h.formatter]
        assert any(f._fmt == LOG_FORMAT for f in formatters)

    def test_unknown_level_falls_back_to_info(self):
        assert configure_logging("chatty").level == logging.INFO


class TestErrorRendering:
    """Test the JSON error body."""

    def test_not_found(self, app):
        with app.test_request_context():
            response, status = handle_marketplace_error(NotFound("Campaign not found"))
        assert status == 404
        assert response.get_json() == {
            "success": False,
            "error": "Campaign not found",
            "type": "NotFound",
        }

    def test_validation_errors_listed(self, app):
        with app.test_request_context():
            response, status = handle_marketplace_error(ValidationError("Invalid", ["bad title"]))
        assert status == 400
        assert response.get_json()["errors"] == ["bad title"]

    def test_base_error_is_server_error(self, app):
        with app.test_request_context():
            _, status = handle_marketplace_error(MarketplaceError("boom"))
        assert status == 500
