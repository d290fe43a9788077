import logging

from cashback.config import Config, configure_logging


def test_defaults():
    assert Config.ALLOWED_EXTENSIONS == {'csv', 'xlsx', 'xls'}
    assert Config.DEFAULT_EXPORT in Config.EXPORT_FORMATS
    assert "Data" in Config.PARSE_ERROR_MESSAGE


def test_configure_logging_accepts_level_names(tmp_path):
    configure_logging(level="debug", log_file=str(tmp_path / "cashback.log"))
    logging.getLogger(__name__).debug("configured")
