# -*- coding: utf-8 -*-
"""
制約伝播（propagation）を行うモジュールです。

- is_consistent() : 新しく置いた数字が、同じ行・列・ブロックの数字とぶつからないか
- revise()        : 弧 (A, B) について、A のドメインから B と衝突する値を1つ取り除く
- ac3()           : 弧のキューを使って、確定したマスの影響を周りに広げる

数独の制約は「異なる数字であること」なので、B のドメインが1つに確定していれば、
その数字は A の候補から外せます。ここでの revise() は1回の呼び出しで
最大1つしか値を消しませんが、A が1つに確定したらその周りの弧を再びキューに
積むので、最終的には同じところまで絞り込まれます。
"""

from __future__ import annotations

from collections import deque
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from ..grid.constraint_graph import PEER_INDEXES
from .domains import FULL_DOMAIN, domain_size, domain_values, value_bit

# 弧 (A, B)：「A のドメインは B と整合していなければならない」
Arc = Tuple[int, int]


def is_consistent(grid: np.ndarray, index: int) -> bool:
    """
    index のマスに置かれた数字が、同じ行・列・ブロックのどのマスの数字とも異なるかを調べます。

    ヒントかどうかに関係なく、その時点で値が入っているマスすべてと比べます。
    """
    value = grid[index]
    for p in PEER_INDEXES[index]:
        if grid[p] == value:
            return False
    return True


def revise(domains: np.ndarray, a: int, b: int) -> bool:
    """
    A のドメインを B に対して整合させます。

    A のドメインを昇順に見ていき、B のドメインにも含まれる値が見つかったら
    その1つだけを A から取り除いて True を返します。
    見つからなければ何もせず False を返します。
    """
    b_mask = int(domains[b])
    for value in domain_values(domains[a]):
        bit = value_bit(value)
        if b_mask & bit:
            domains[a] = int(domains[a]) & (FULL_DOMAIN ^ bit)
            return True
    return False


def seed_arcs(index: int, neighbour_table: Sequence[Tuple[int, ...]]) -> List[Arc]:
    """新しく確定した変数 index に向かう弧 (隣接変数 → index) を並べます。"""
    return [(n, index) for n in neighbour_table[index]]


def ac3(
    arcs: Iterable[Arc],
    domains: np.ndarray,
    neighbour_table: Sequence[Tuple[int, ...]],
) -> bool:
    """
    AC-3 で弧整合を取ります。domains はその場で書き換えます。

    Parameters
    ----------
    arcs : iterable of (int, int)
        最初にキューに積む弧。
    domains : numpy.ndarray
        長さ 81 の uint16 配列。
    neighbour_table : sequence of tuple of int
        添字ごとの隣接変数。

    Returns
    -------
    bool
        矛盾（どこかのドメインが空になった）を見つけたら False。
    """
    queue = deque(arcs)

    while queue:
        a, b = queue.popleft()
        if not revise(domains, a, b):
            continue

        # 候補がなくなった → この割り当てでは解けない
        if domains[a] == 0:
            return False

        # A が1つに確定したときだけ、その周りに新しい推論を広げられる
        if domain_size(domains[a]) == 1:
            for c in neighbour_table[a]:
                if c != b:
                    queue.append((c, a))

    return True
