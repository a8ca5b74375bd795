import logging

import pytest

from wal_lineage import log_help


@pytest.fixture(autouse=True)
def detach_log_handlers():
    yield

    root = logging.getLogger()
    for handler in log_help.HANDLERS:
        root.removeHandler(handler)
        handler.close()
    del log_help.HANDLERS[:]
