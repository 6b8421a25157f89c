# -*- coding: utf-8 -*-
"""
探索結果をもとに表示用の情報を構築するモジュールです。

盤面の描画そのものは呼び出し側（Web フロントエンドなど）の仕事なので、
ここでは JSON にそのまま出せる dict を作るところまでを担当します。
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import numpy as np

from ..grid.parser import grid_to_board
from ..types import Cancelled, Solved, SolveOutcome, Unsatisfiable


def build_message(outcome: SolveOutcome) -> str:
    """結果の種類ごとに、画面に出すメッセージを返します。"""
    if isinstance(outcome, Solved):
        return f"Done. {outcome.explored} states explored."
    if isinstance(outcome, Cancelled):
        return "Stopped"
    return "No solution"


def build_result(outcome: SolveOutcome, givens: Optional[np.ndarray] = None) -> Dict[str, Any]:
    """
    SolveOutcome を表示用の dict に変換します。

    Parameters
    ----------
    outcome : Solved, Unsatisfiable or Cancelled
        solve() の結果。
    givens : numpy.ndarray, optional
        元の盤面。解がない場合はこれをそのまま表示します。

    Returns
    -------
    dict
        status / board / explored / duration_ms / message（と、必要なら conflicts）。
    """
    if isinstance(outcome, Solved):
        board = grid_to_board(outcome.grid)
    elif isinstance(outcome, Cancelled):
        board = grid_to_board(outcome.last_grid)
    else:
        board = grid_to_board(givens)

    result: Dict[str, Any] = {
        "status": outcome.status,
        "board": board,  # ★ numpy 配列は返さない
        "explored": outcome.explored,
        "duration_ms": outcome.duration_ms,
        "message": build_message(outcome),
    }

    if isinstance(outcome, Unsatisfiable) and outcome.conflicts:
        result["conflicts"] = list(outcome.conflicts)

    return result
