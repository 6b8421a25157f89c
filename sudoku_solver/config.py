# -*- coding: utf-8 -*-
"""
sudoku_solver 全体で共通して使う設定値をまとめたモジュールです。

ここを編集することで
- 盤面のサイズ（9x9 固定）
- アニメーション用の待ち時間の既定値・上限
- 探索ログの出力頻度
- 1手ごとのトレースログの有無
などを変更できます。
"""

from __future__ import annotations

# ==== 盤面関連 =============================================================

# 盤面の一辺のマス数
GRID_SIZE: int = 9

# 3x3 ブロックの一辺のマス数
BOX_SIZE: int = 3

# 全マス数（フラット配列の長さ）
CELL_COUNT: int = GRID_SIZE * GRID_SIZE

# マスに入れられる数字
DIGITS: tuple = tuple(range(1, GRID_SIZE + 1))

# ==== 探索のペース配分 =====================================================

# 1手ごとに挟む待ち時間（秒）。0 なら待たずに探索します。
DEFAULT_STEP_DELAY_SEC: float = 0.0

# Web API から指定できる待ち時間の上限（ミリ秒）。
# ブラウザ版のスライダー（0〜500ms）に合わせています。
MAX_STEP_DELAY_MS: int = 500

# ==== ログ関連 =============================================================

# 何状態探索するごとに DEBUG ログで進捗を出すか
PROGRESS_LOG_INTERVAL: int = 1000

# 1手ごとの試行をファイルに書き出すかどうか（かなり量が多いので通常は無効）
SEARCH_TRACE_ENABLED: bool = False

# トレースログの出力先
SEARCH_TRACE_LOG_PATH: str = "logs/search_trace.log"
