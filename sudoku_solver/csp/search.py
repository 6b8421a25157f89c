# -*- coding: utf-8 -*-
"""
バックトラック探索を行うモジュールです。

ざっくり流れ
------------
1. ヒント同士がすでに矛盾していないか、構築時の伝播で候補が尽きた変数がないかを確認する
   （どちらかなら探索せずに「解なし」）
2. 全マスが埋まっていれば、その盤面が解
3. MRV + degree で次に埋める変数を選ぶ
4. その変数のドメインを小さい数字から順に試す
   a. 盤面とドメインを複製して数字を置く
   b. 進捗を通知し、キャンセルされていないかを確認する（ここが唯一の中断点）
   c. 同じ行・列・ブロックの数字とぶつかれば次の数字へ
   d. ドメインを {数字} に確定させて AC-3 で周りに伝播し、矛盾すれば次の数字へ
   e. 再帰し、解が見つかればそのまま返す
5. どの数字もだめなら None を返して、呼び出し元に別の数字を試させる

各再帰呼び出しは自分専用の盤面・ドメインのコピーを持つので、
兄弟の枝どうしで状態を共有することはありません。
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..config import (
    DEFAULT_STEP_DELAY_SEC, GRID_SIZE, PROGRESS_LOG_INTERVAL, SEARCH_TRACE_ENABLED,
)
from ..control import CancelToken, ProgressSink
from ..grid.constraint_graph import find_duplicate_units
from ..logging_utils import get_logger, get_search_trace_logger
from ..types import (
    Cancelled, PuzzleModel, SearchCancelled, Solved, SolveOutcome, Unsatisfiable,
)
from .domains import domain_size, domain_values, value_bit
from .propagation import ac3, is_consistent, seed_arcs

logger = get_logger()


@dataclass
class SearchContext:
    """
    1回の solve() の間だけ共有する情報をまとめたクラスです。
    """

    model: PuzzleModel
    progress_sink: Optional[ProgressSink] = None
    cancel_token: Optional[CancelToken] = None
    step_delay: float = DEFAULT_STEP_DELAY_SEC

    explored: int = 0
    last_grid: Optional[np.ndarray] = None

    def checkpoint(self, grid: np.ndarray) -> None:
        """
        1手試すごとに1回だけ呼ばれる中断点です。

        進捗を通知し、指定があれば待ち、キャンセルされていれば SearchCancelled を送出します。
        """
        view = grid.reshape(GRID_SIZE, GRID_SIZE)
        view.flags.writeable = False
        self.last_grid = view

        if self.progress_sink is not None:
            self.progress_sink(self.explored, view)

        if self.cancel_token is not None:
            if self.cancel_token.wait(self.step_delay):
                raise SearchCancelled()
        elif self.step_delay > 0:
            time.sleep(self.step_delay)


def degree(index: int, grid: np.ndarray, model: PuzzleModel) -> int:
    """index の隣接変数のうち、まだ数字が入っていないものの数。"""
    return sum(1 for n in model.neighbour_table[index] if grid[n] == 0)


def choose_next_var(grid: np.ndarray, domains: np.ndarray, model: PuzzleModel) -> Optional[int]:
    """
    次に割り当てるべき変数を選びます。

    MRV（Minimum Remaining Values）＋ degree ヒューリスティック：
    - 未割り当ての変数を行優先で1回だけ走査する
    - ドメインがこれまでの最小より小さければ、それを新しい候補にする
    - 同じ大きさなら、degree（未割り当ての隣接変数の数）が大きいときだけ入れ替える

    結果は (ドメインサイズ 昇順, degree 降順, 行優先で先のもの) の順で最初の変数と同じです。
    """
    best: Optional[int] = None
    best_size = GRID_SIZE + 1
    best_degree = -1

    for index in model.variables:
        if grid[index] != 0:
            continue
        size = domain_size(domains[index])
        if size > best_size:
            continue
        d = degree(index, grid, model)
        if size < best_size or d > best_degree:
            best, best_size, best_degree = index, size, d

    return best


def backtrack(ctx: SearchContext, grid: np.ndarray, domains: np.ndarray) -> Optional[np.ndarray]:
    """
    再帰的に変数を埋めていき、解の盤面（長さ 81）か None を返します。
    """
    if not (grid == 0).any():
        return grid

    ctx.explored += 1
    if ctx.explored % PROGRESS_LOG_INTERVAL == 0:
        logger.debug("Explored %d states.", ctx.explored)

    var = choose_next_var(grid, domains, ctx.model)
    if var is None:
        return None

    trace = get_search_trace_logger() if SEARCH_TRACE_ENABLED else None
    row, col = divmod(var, GRID_SIZE)

    for value in domain_values(domains[var]):
        new_grid = grid.copy()
        new_domains = domains.copy()
        new_grid[var] = value

        ctx.checkpoint(new_grid)

        if not is_consistent(new_grid, var):
            if trace:
                trace.debug("Inconsistent: r%dc%d = %d", row + 1, col + 1, value)
            continue

        new_domains[var] = value_bit(value)
        if not ac3(seed_arcs(var, ctx.model.neighbour_table), new_domains, ctx.model.neighbour_table):
            if trace:
                trace.debug("Wipeout: r%dc%d = %d", row + 1, col + 1, value)
            continue

        if trace:
            trace.debug("Guess: r%dc%d = %d (explored=%d)", row + 1, col + 1, value, ctx.explored)

        result = backtrack(ctx, new_grid, new_domains)
        if result is not None:
            return result

    return None


def solve(
    model: PuzzleModel,
    progress_sink: Optional[ProgressSink] = None,
    cancel_token: Optional[CancelToken] = None,
    step_delay: float = DEFAULT_STEP_DELAY_SEC,
) -> SolveOutcome:
    """
    数独を解きます。

    Parameters
    ----------
    model : PuzzleModel
        build_puzzle_model() で作ったモデル。
    progress_sink : callable, optional
        1手試すごとに (探索状態数, 途中盤面 9x9) で呼ばれます。
    cancel_token : CancelToken, optional
        キャンセルされると、次の中断点で探索を打ち切ります。
    step_delay : float
        1手ごとに挟む待ち時間（秒）。結果には影響しません。

    Returns
    -------
    Solved, Unsatisfiable or Cancelled
    """
    start = time.perf_counter()
    ctx = SearchContext(
        model=model,
        progress_sink=progress_sink,
        cancel_token=cancel_token,
        step_delay=step_delay,
    )

    def elapsed_ms() -> int:
        return int((time.perf_counter() - start) * 1000)

    conflicts = find_duplicate_units(model.givens)
    if conflicts:
        logger.info("Conflicting givens in %s; skip search.", ", ".join(conflicts))
        return Unsatisfiable(explored=0, duration_ms=elapsed_ms(), conflicts=tuple(conflicts))

    if not model.consistent:
        logger.info("Givens leave a variable without candidates; skip search.")
        return Unsatisfiable(explored=0, duration_ms=elapsed_ms())

    try:
        result = backtrack(ctx, model.givens.copy(), model.domains.copy())
    except SearchCancelled:
        logger.info("Search cancelled after %d states.", ctx.explored)
        return Cancelled(explored=ctx.explored, duration_ms=elapsed_ms(), last_grid=ctx.last_grid)

    if result is None:
        return Unsatisfiable(explored=ctx.explored, duration_ms=elapsed_ms())

    return Solved(
        grid=result.reshape(GRID_SIZE, GRID_SIZE).copy(),
        explored=ctx.explored,
        duration_ms=elapsed_ms(),
    )
