from __future__ import annotations

from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from ..errors import ArrayLengthError


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple, np.ndarray, pd.Series))


def as_float_array(value: Any, name: str = "value") -> np.ndarray:
    """list / tuple / ndarray / Series / スカラを 1次元の float64 配列にする。"""
    if isinstance(value, pd.Series):
        arr = value.to_numpy(dtype="float64")
    else:
        arr = np.asarray(value, dtype="float64")
    if arr.ndim == 0:
        arr = arr.reshape(1)
    if arr.ndim != 1:
        raise ArrayLengthError(f"{name} は 1次元で指定してください (ndim={arr.ndim})")
    return arr


def ensure_sequence(value: Any, length: int) -> list:
    # スカラは length 個に複製する
    if _is_sequence(value):
        return list(value)
    return [value] * length


def broadcast_inputs(**kwargs: Any) -> Dict[str, list]:
    """
    配列版 API の入力をそろえる。
    - シーケンスはすべて同じ長さであること（違えば ArrayLengthError）
    - スカラ / None は共通の長さに複製する
    戻り値は各キー → 長さ n の list。
    """
    lengths = {k: len(v) for k, v in kwargs.items() if _is_sequence(v)}
    if not lengths:
        n = 1
    else:
        distinct = sorted(set(lengths.values()))
        if len(distinct) > 1:
            detail = ", ".join(f"{k}={n}" for k, n in lengths.items())
            raise ArrayLengthError(f"配列の長さが一致しません: {detail}")
        n = distinct[0]
    return {k: ensure_sequence(v, n) for k, v in kwargs.items()}


def wrap_like(values: List[float], like: Any, name: Optional[str] = None):
    """
    結果を返す型をそろえる。
    like が pandas.Series なら同じ index の Series、それ以外は ndarray。
    """
    arr = np.asarray(values, dtype="float64")
    if isinstance(like, pd.Series):
        return pd.Series(arr, index=like.index, name=name)
    return arr


__all__ = ["as_float_array", "ensure_sequence", "broadcast_inputs", "wrap_like"]
