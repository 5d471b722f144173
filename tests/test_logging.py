import logging

from library_api.app.core.logging_config import CONSOLE_HANDLER_NAME, UVICORN_LOGGERS, setup_logging


def test_setup_logging_is_idempotent():
    setup_logging("INFO")
    setup_logging("INFO")

    names = [handler.get_name() for handler in logging.getLogger().handlers]
    assert names.count(CONSOLE_HANDLER_NAME) == 1


def test_level_applies_to_package_and_uvicorn_loggers():
    setup_logging("DEBUG")
    try:
        assert logging.getLogger("library_api").level == logging.DEBUG
        for name in UVICORN_LOGGERS:
            assert logging.getLogger(name).level == logging.DEBUG
    finally:
        setup_logging("INFO")


def test_uvicorn_records_reach_root_handlers(caplog):
    logging.getLogger("uvicorn.access").addHandler(logging.NullHandler())
    setup_logging("INFO")

    with caplog.at_level(logging.INFO):
        logging.getLogger("uvicorn.access").info('127.0.0.1 - "GET /api/v1/books HTTP/1.1" 200')

    assert logging.getLogger("uvicorn.access").handlers == []
    assert "GET /api/v1/books" in caplog.text


def test_log_file_receives_records(tmp_path):
    logfile = tmp_path / "library.log"
    setup_logging("INFO", str(logfile))
    root = logging.getLogger()
    try:
        logging.getLogger("library_api.test").info("Patron 1 borrowed book 2")
        for handler in root.handlers:
            handler.flush()
        assert "Patron 1 borrowed book 2" in logfile.read_text(encoding="utf-8")
    finally:
        for handler in [h for h in root.handlers if h.get_name() == "library_api.file"]:
            root.removeHandler(handler)
            handler.close()
