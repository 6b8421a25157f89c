# -*- coding: utf-8 -*-
"""
sudoku_solver.grid パッケージ

盤面（グリッド）に関する処理をまとめたサブパッケージです。
- parser.py           : DataFrame / リストなどから内部表現への変換
- constraint_graph.py : 行・列・ブロックの制約でつながったマス（隣接マス）の計算
"""
