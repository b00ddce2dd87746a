# File: tests/test_logger.py
import io

from site_audit.logger import LOGGER_NAME, configure, get_logger, init_logging


def test_child_loggers_use_root_handlers(tmp_path):
    stream = io.StringIO()
    log_file = tmp_path / "logs" / "audit.log"
    try:
        configure(level="DEBUG", log_file=log_file, log_format="%(name)s:%(message)s", stream=stream)
        get_logger("discovery.sitemap").info("sitemap found")
        get_logger().debug("root message")
        for handler in get_logger().handlers:
            handler.flush()

        assert f"{LOGGER_NAME}.discovery.sitemap:sitemap found" in stream.getvalue()
        assert f"{LOGGER_NAME}:root message" in stream.getvalue()
        assert "sitemap found" in log_file.read_text(encoding="utf-8")
    finally:
        init_logging()


def test_replace_handlers():
    try:
        configure(stream=io.StringIO())
        configure(stream=io.StringIO(), replace_handlers=False)
        assert len(get_logger().handlers) == 2
        configure(stream=io.StringIO())
        assert len(get_logger().handlers) == 1
        assert get_logger().propagate is False
    finally:
        init_logging()
