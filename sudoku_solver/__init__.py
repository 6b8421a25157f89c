# -*- coding: utf-8 -*-
"""
sudoku_solver パッケージの入口となるモジュールです。

Web アプリなどから:

    from sudoku_solver import solve

と呼び出されることを想定しています。

ここでは、盤面（pandas.DataFrame、9x9 のリスト、または構築済みの PuzzleModel）を受け取り、
1. 盤面の形・値のチェックと正規化
2. ノード整合による初期ドメインの計算（PuzzleModel の構築）
3. MRV + degree + AC-3 付きのバックトラック探索
4. 表示用の結果構築
を順番に呼び出します。
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .config import DEFAULT_STEP_DELAY_SEC
from .control import CancelToken, ProgressSink
from .csp.domains import build_puzzle_model
from .csp.search import solve as solve_model
from .logging_utils import get_logger
from .postprocess.render_result import build_result
from .types import (
    Cancelled, InvalidCellError, InvalidShapeError, PuzzleModel, Solved, SolveOutcome,
    Unsatisfiable,
)

__all__ = [
    "CancelToken",
    "Cancelled",
    "InvalidCellError",
    "InvalidShapeError",
    "ProgressSink",
    "PuzzleModel",
    "Solved",
    "SolveOutcome",
    "Unsatisfiable",
    "build_puzzle_model",
    "solve",
    "solve_model",
]

logger = get_logger()


def solve(
    board: Any,
    progress_sink: Optional[ProgressSink] = None,
    cancel_token: Optional[CancelToken] = None,
    step_delay: float = DEFAULT_STEP_DELAY_SEC,
) -> Dict[str, Any]:
    """
    数独を解くメイン関数。

    盤面の形や値が不正な場合は InvalidShapeError / InvalidCellError をそのまま送出します。
    構築済みの PuzzleModel を渡した場合は、そのまま探索に使います。
    """
    logger.info("=== solve() START ===")

    # 1) 盤面パース + 2) 初期ドメイン
    model = board if isinstance(board, PuzzleModel) else build_puzzle_model(board)
    logger.info(
        "Givens=%d, Variables=%d", len(model.givens) - len(model.variables), len(model.variables)
    )

    # 3) 探索
    outcome = solve_model(
        model,
        progress_sink=progress_sink,
        cancel_token=cancel_token,
        step_delay=step_delay,
    )
    logger.info(
        "Outcome=%s, explored=%d, duration=%d ms",
        outcome.status, outcome.explored, outcome.duration_ms,
    )

    # 4) 表示用の結果
    result = build_result(outcome, givens=model.givens)

    logger.info("=== solve() END ===")
    return result
