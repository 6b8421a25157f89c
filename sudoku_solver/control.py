# -*- coding: utf-8 -*-
"""
探索と外部（UI や Web API）をつなぐ窓口です。

- ProgressSink : 1手試すごとに (探索状態数, 途中盤面) を受け取るコールバック
- CancelToken  : 外部から探索の中断を要求するためのフラグ

探索側はこの2つ以外で外部とやりとりしません。
"""

from __future__ import annotations

import threading
from typing import Callable

import numpy as np

ProgressSink = Callable[[int, np.ndarray], None]


class CancelToken:
    """
    協調的キャンセルのためのトークンです。

    呼び出し側が cancel() を呼ぶと、探索は次の中断点でそれに気づいて打ち切ります。
    伝播（AC-3）の途中で止まることはありません。
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, delay: float) -> bool:
        """
        最大 delay 秒だけ待ちます。待っている間にキャンセルされたらすぐに戻ります。

        Returns
        -------
        bool
            キャンセルされていれば True。
        """
        if delay <= 0:
            return self._event.is_set()
        return self._event.wait(delay)
