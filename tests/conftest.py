#
# Pytest Fixtures
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest
from loguru import logger


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def log_records():
    """Capture loguru records as (level name, message) tuples, TRACE and above."""
    records = []

    def sink(message):
        record = message.record
        records.append((record["level"].name, record["message"]))

    handler_id = logger.add(sink, level="TRACE", format="{message}")
    yield records
    logger.remove(handler_id)
