"""Root pytest configuration for all tests.

This conftest applies to all test types (unit, integration).
"""

import logging

# atlassian-python-api logs every failed request at ERROR level; tests that
# exercise error translation trigger these on purpose.
logging.getLogger("atlassian").setLevel(logging.WARNING)
