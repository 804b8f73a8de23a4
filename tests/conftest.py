import pytest

from phoneshop.infrastructure import bootstrap
from phoneshop.logging_config import reset_logging


@pytest.fixture(autouse=True)
def _clean_process_state():
    """Logging config and the CLI's engine are process-wide; reset per test."""
    reset_logging()
    bootstrap.reset()
    yield
    bootstrap.reset()
    reset_logging()
