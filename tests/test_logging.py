import logging

import pytest

from flight_mode.logging import _parse_log_level, setup_logging


@pytest.fixture
def restore_levels():
    names = ("", "flight_mode", "httpx")
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, logging.INFO),
        ("", logging.INFO),
        ("debug", logging.DEBUG),
        (" WARNING ", logging.WARNING),
        ("chatty", logging.INFO),
    ],
)
def test_parse_log_level(value, expected):
    assert _parse_log_level(value) == expected


def test_setup_logging_sets_package_level_and_quiets_httpx(restore_levels):
    resolved = setup_logging("DEBUG")

    assert resolved == logging.DEBUG
    assert logging.getLogger("flight_mode").level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger().handlers


def test_setup_logging_keeps_stricter_httpx_level(restore_levels):
    setup_logging("ERROR")

    assert logging.getLogger("httpx").level == logging.ERROR
