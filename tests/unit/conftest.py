"""
Pytest configuration for merchantchat unit tests.

Unit tests MUST be isolated from external dependencies:
- No LLM API calls
- No external services
"""

import pytest


def pytest_collection_modifyitems(items):
    """Automatically add 'unit' marker to all tests in /unit/."""
    for item in items:
        if "/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
