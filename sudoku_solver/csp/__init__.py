# -*- coding: utf-8 -*-
"""
sudoku_solver.csp パッケージ

CSP（制約充足問題）としての数独の解法をまとめています。

- domains.py     : ノード整合による初期ドメインの計算と PuzzleModel の構築
- propagation.py : 整合性チェックと AC-3（revise）による制約伝播
- search.py      : MRV + degree ヒューリスティック付きのバックトラック探索
"""
