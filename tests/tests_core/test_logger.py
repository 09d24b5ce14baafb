"""
Test suite for core.logger module.

Tests cover:
- get_logger: naming and level override
- ColoredFormatter: color codes, emoji markers, record restoration
- setup_logging: console and file handlers
"""

import logging

import pytest

from core.logger import ColoredFormatter, get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after setup_logging()."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.unit
def test_get_logger_returns_named_logger():
    """Test get_logger returns the standard logger for the name."""
    assert get_logger('sql.test_name') is logging.getLogger('sql.test_name')


@pytest.mark.unit
def test_get_logger_level_override():
    """Test the optional level is applied."""
    logger = get_logger('sql.test_level', level='debug')
    assert logger.level == logging.DEBUG


@pytest.mark.unit
def test_colored_formatter_adds_color_and_emoji():
    """Test levelname is colored and the emoji attribute is set."""
    formatter = ColoredFormatter('%(emoji)s %(levelname)s %(message)s')
    record = logging.LogRecord('x', logging.ERROR, __file__, 1, 'boom', None, None)

    output = formatter.format(record)

    assert output.startswith('❌ ')
    assert '\033[31mERROR\033[0m' in output
    assert output.endswith('boom')
    assert record.levelname == 'ERROR'


@pytest.mark.unit
def test_setup_logging_console_only(restore_root_logger):
    """Test console-only setup installs one stream handler."""
    setup_logging(log_level='WARNING', use_colors=False)

    assert restore_root_logger.level == logging.WARNING
    assert len(restore_root_logger.handlers) == 1
    assert isinstance(restore_root_logger.handlers[0], logging.StreamHandler)


@pytest.mark.integration
def test_setup_logging_writes_file(restore_root_logger, tmp_path):
    """Test file output is written under the given directory."""
    setup_logging(
        log_level='DEBUG',
        log_file='builder.log',
        log_dir=str(tmp_path / 'logs'),
        console_output=False
    )
    get_logger('sql.file_test').debug('rendered statement')
    for handler in restore_root_logger.handlers:
        handler.flush()

    content = (tmp_path / 'logs' / 'builder.log').read_text(encoding='utf-8')
    assert 'sql.file_test - DEBUG - rendered statement' in content
