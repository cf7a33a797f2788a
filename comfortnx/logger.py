import logging
import os
from datetime import datetime
from pathlib import Path


# 単一実行につき1つのログファイルに集約するため、
# 共通親ロガー（"comfortnx"）へ一度だけハンドラを設定する。
APP_LOGGER_NAME = "comfortnx"
LOG_DIR_ENV = "COMFORTNX_LOG_DIR"
LOG_LEVEL_ENV = "COMFORTNX_LOG_LEVEL"


def _ensure_parent_logger_initialized() -> logging.Logger:
    parent = logging.getLogger(APP_LOGGER_NAME)
    if parent.handlers:
        return parent

    level = os.environ.get(LOG_LEVEL_ENV, "DEBUG").upper()
    # 未知のレベル名は DEBUG 扱い
    if not isinstance(logging.getLevelName(level), int):
        level = "DEBUG"
    parent.setLevel(level)

    # ライブラリとして import されるだけでファイルが増えないよう、
    # 出力先ディレクトリが指定された場合のみ FileHandler を付ける
    log_dir = os.environ.get(LOG_DIR_ENV)
    if not log_dir:
        parent.addHandler(logging.NullHandler())
        return parent

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = log_dir / f"comfortNx_{timestamp}.log"

    parent.propagate = False

    fh = logging.FileHandler(log_path, encoding="utf-8-sig")
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
    parent.addHandler(fh)
    return parent


def get_logger(name: str = __name__) -> logging.Logger:
    # 親ロガーへハンドラを一度だけ設定し、子ロガーを返す
    _ensure_parent_logger_initialized()
    if name == APP_LOGGER_NAME or name.startswith(f"{APP_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")
