"""
ログ設定

- コンソール: INFO
- ファイル（log_dir 指定時のみ）: TimedRotatingFileHandler で毎日ローテーション

    from kaikei.core.logging import setup_logging
    setup_logging("kaikei")
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 7  # 7日分


def setup_logging(
    process_name: str = "kaikei",
    console_level: int = logging.INFO,
    log_dir: Path | None = None,
    file_level: int = logging.INFO,
) -> logging.Logger:
    """ルートロガーを設定して返す（既存のハンドラは外す）"""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"{process_name}.log"

        file_handler = TimedRotatingFileHandler(
            filename=log_file,
            when="midnight",
            interval=1,
            backupCount=LOG_FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        root_logger.info(f"ログファイル: {log_file}（{logging.getLevelName(file_level)}、日次ローテーション）")

    root_logger.info(f"ログ設定完了: {process_name}")
    return root_logger


def get_log_file_path(log_dir: Path, process_name: str = "kaikei") -> Path:
    return Path(log_dir) / f"{process_name}.log"
