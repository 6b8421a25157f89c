# -*- coding: utf-8 -*-
"""
ログ出力の設定を行うモジュールです。

- get_logger()              : パッケージ共通のロガー（標準出力へ INFO）
- get_search_trace_logger() : 探索の1手ごとの試行を書き出すファイル用ロガー
"""

from __future__ import annotations

import logging
import os

from .config import SEARCH_TRACE_LOG_PATH

# sudoku_solver パッケージ共通で使うロガー名
LOGGER_NAME = "sudoku_solver"


def get_logger() -> logging.Logger:
    """
    sudoku_solver 全体で共通して使う logger を返します。

    すでに handler（出力先）が設定されていない場合は、
    標準出力（コンソール）に INFO レベルのログを表示するように設定します。
    """
    logger = logging.getLogger(LOGGER_NAME)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    return logger


def get_search_trace_logger() -> logging.Logger:
    logger = logging.getLogger(f"{LOGGER_NAME}.trace")

    if logger.handlers:
        return logger  # すでに初期化済み

    logger.setLevel(logging.DEBUG)

    log_dir = os.path.dirname(SEARCH_TRACE_LOG_PATH)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    fh = logging.FileHandler(SEARCH_TRACE_LOG_PATH, encoding="utf-8")
    fh.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    fh.setFormatter(formatter)

    logger.addHandler(fh)

    # 親ロガーへの伝播禁止（stdout に出さない）
    logger.propagate = False

    return logger
