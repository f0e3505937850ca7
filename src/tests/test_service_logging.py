"""Tests for service layer structured logging.

These tests verify that the bulk upload pipeline emits structured log
entries with section counters and tenant context.
"""

import logging

from src.services.bulk_upload_service import process_bulk_upload
from src.services.dto import BulkUploadDocument
from src.services.logging_utils import get_service_logger, log_operation


class TestLoggingUtilities:
    """Tests for logging utility functions."""

    def test_get_service_logger_extracts_module_name(self):
        """get_service_logger keeps only the module name under the service prefix."""
        logger = get_service_logger("src.services.bulk_upload_service")
        assert logger.name == "menu_import.services.bulk_upload_service"

    def test_log_operation_logs_at_info_level(self, caplog):
        logger = get_service_logger("test")

        with caplog.at_level(logging.INFO):
            log_operation(logger, operation="test_op", outcome="success", restaurant_id=1)

        assert "test_op: success" in caplog.text

    def test_log_operation_attaches_context(self, caplog):
        logger = get_service_logger("test")

        with caplog.at_level(logging.DEBUG):
            log_operation(
                logger,
                operation="reconcile_tags",
                outcome="partial",
                level=logging.WARNING,
                section="tags",
                error_count=2,
            )

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.operation == "reconcile_tags"
        assert record.section == "tags"
        assert record.error_count == 2


class TestBulkUploadLogging:
    def test_section_and_upload_records(self, restaurant, caplog):
        document = BulkUploadDocument.from_records(
            {"categories": [{"Name": "Starters"}, {"Name": "Starters"}]}
        )

        with caplog.at_level(logging.INFO, logger="menu_import.services"):
            process_bulk_upload(document, restaurant.id)

        operations = {r.operation: r for r in caplog.records if hasattr(r, "operation")}
        section = operations["reconcile_categories"]
        assert section.outcome == "partial"
        assert section.levelno == logging.WARNING
        assert section.created_count == 1
        assert section.error_count == 1
        assert operations["bulk_upload"].restaurant_id == restaurant.id
