import logging

from comfortnx.logger import APP_LOGGER_NAME, LOG_DIR_ENV, LOG_LEVEL_ENV, get_logger


def test_get_logger_prefixes_child_name():
    assert get_logger("comfortnx.models.set_tmp").name == "comfortnx.models.set_tmp"
    assert get_logger("scripts.batch").name == "comfortnx.scripts.batch"
    assert get_logger(APP_LOGGER_NAME).name == APP_LOGGER_NAME


def test_parent_logger_has_single_handler():
    get_logger("a")
    get_logger("b")
    parent = logging.getLogger(APP_LOGGER_NAME)
    assert len(parent.handlers) == 1


def test_unknown_log_level_falls_back_to_debug(monkeypatch):
    parent = logging.getLogger(APP_LOGGER_NAME)
    # ハンドラ未設定の状態から初期化し直す（終了後に元へ戻る）
    monkeypatch.setattr(parent, "handlers", [])
    monkeypatch.setattr(parent, "level", parent.level)
    monkeypatch.delenv(LOG_DIR_ENV, raising=False)
    monkeypatch.setenv(LOG_LEVEL_ENV, "verbose")

    get_logger("comfortnx.models.pmv")
    assert parent.level == logging.DEBUG
    assert len(parent.handlers) == 1
