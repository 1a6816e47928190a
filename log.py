import logging
from logging.handlers import RotatingFileHandler
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_dir=None, level=logging.INFO):
    # File log (nên dùng path tuyệt đối)
    if not log_dir:
        log_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(os.path.abspath(log_dir), "app.log")

    log_formatter = logging.Formatter(LOG_FORMAT)

    # --- Logger gốc ---
    app_logger = logging.getLogger()
    app_logger.setLevel(level)

    # Console handler (tránh add lặp)
    if not any(
        type(h) is logging.StreamHandler for h in app_logger.handlers
    ):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(log_formatter)
        app_logger.addHandler(console_handler)

    # File handler (tránh add lặp)
    if not any(
        isinstance(h, RotatingFileHandler) and h.baseFilename == log_file
        for h in app_logger.handlers
    ):
        file_handler = RotatingFileHandler(
            log_file, maxBytes=10 * 1024 * 1024, backupCount=5
        )
        file_handler.setFormatter(log_formatter)
        app_logger.addHandler(file_handler)

    # Purge log riêng: mọi lần purge đều ghi ra app.log qua root logger
    logging.getLogger("purge_logger").setLevel(level)

    # Đảm bảo Flask không tự động double-log (nếu dùng Flask >2.3)
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    return log_file
