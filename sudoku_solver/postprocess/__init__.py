# -*- coding: utf-8 -*-
"""
sudoku_solver.postprocess パッケージ

探索結果を表示用のデータに変換する処理をまとめています。
"""
