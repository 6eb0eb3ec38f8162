"""
Pytest configuration for the mozcpp test suite.

Tests marked ``integration`` run a real clang against a generated source
tree. They are skipped unless ``--full`` is given.
"""

import pytest

FULL_OPTION = "--full"


def pytest_addoption(parser):
    parser.addoption(
        FULL_OPTION,
        action="store_true",
        default=False,
        help="Also run integration tests (needs clang on PATH)",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption(FULL_OPTION):
        return

    skip_integration = pytest.mark.skip(reason=f"integration test, run with {FULL_OPTION}")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
