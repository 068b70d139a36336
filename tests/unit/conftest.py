"""Fixtures for unit tests."""

from typing import Generator

import pytest
import structlog

from tests.unit.fakes import FakeOrganizationClient, make_pull_request, make_repository


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def left_pad_org() -> FakeOrganizationClient:
    """Organization with an archived repo, a push-enabled repo with two left-pad upgrades, and a read-only repo."""
    archived = make_repository("A", archived=True)
    writable = make_repository("B")
    read_only = make_repository("C", can_push=False)
    return FakeOrganizationClient(
        repositories=[archived, writable, read_only],
        pull_requests={
            "acme/A": [make_pull_request(archived, 1, "Bump left-pad from 1.0.0 to 1.0.1")],
            "acme/B": [
                make_pull_request(writable, 1, "Bump left-pad from 1.0.0 to 1.0.1"),
                make_pull_request(writable, 2, "Bump left-pad from 1.0.0 to 1.0.1"),
            ],
            "acme/C": [make_pull_request(read_only, 1, "Bump left-pad from 1.0.0 to 1.0.1")],
        },
    )
