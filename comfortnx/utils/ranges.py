from __future__ import annotations

import math
from typing import Dict, Tuple, Union

import numpy as np

from ..config_types import StandardEnum

Number = Union[float, np.ndarray]


def valid_range(value: Number, bounds: Tuple[float, float]) -> Number:
    """範囲 [low, high]（両端含む）の外側を NaN にして返す。"""
    low, high = bounds
    if np.ndim(value) == 0:
        x = float(value)
        return x if low <= x <= high else math.nan
    arr = np.asarray(value, dtype="float64")
    return np.where((arr >= low) & (arr <= high), arr, np.nan)


def round_value(value: Number, digits: int = 1) -> Number:
    """小数点以下 digits 桁で丸める（NaN はそのまま）。"""
    if np.ndim(value) == 0:
        x = float(value)
        return x if math.isnan(x) else float(np.around(x, digits))
    return np.around(np.asarray(value, dtype="float64"), digits)


# 各規格の適用範囲（SI）
ASHRAE_LIMITS: Dict[str, Tuple[float, float]] = {
    "tdb": (10.0, 40.0),
    "tr": (10.0, 40.0),
    "v": (0.0, 2.0),
    "met": (1.0, 4.0),
    "clo": (0.0, 1.5),
}

ISO_LIMITS: Dict[str, Tuple[float, float]] = {
    "tdb": (10.0, 30.0),
    "tr": (10.0, 40.0),
    "v": (0.0, 1.0),
    "met": (0.8, 4.0),
    "clo": (0.0, 2.0),
}


def _ashrae_airspeed_without_control(v: np.ndarray, to: np.ndarray) -> np.ndarray:
    # 在室者が風速を調整できない場合の上限（ASHRAE 55-2020 5.3.3）
    v = np.where((to > 25.5) & (v > 0.8), np.nan, v)
    v = np.where((to > 23.0) & (to <= 25.5) & (v > 50.49 - 4.4047 * to + 0.096425 * to * to), np.nan, v)
    v = np.where((to <= 23.0) & (v > 0.2), np.nan, v)
    return v


def check_standard_compliance(
    standard: Union[str, StandardEnum] = "ashrae",
    *,
    tdb: Number,
    tr: Number,
    v: Number,
    met: Number,
    clo: Number,
    airspeed_control: bool = True,
) -> Dict[str, Number]:
    """
    規格の適用範囲を満たさない要素を NaN にした dict を返す（キー: tdb, tr, v, met, clo）。
    いずれかが NaN になった要素は、呼び出し側で結果を NaN にする。
    """
    std = StandardEnum.parse(standard)
    limits = ASHRAE_LIMITS if std is StandardEnum.ASHRAE else ISO_LIMITS
    values = {"tdb": tdb, "tr": tr, "v": v, "met": met, "clo": clo}
    out = {key: valid_range(val, limits[key]) for key, val in values.items()}

    if std is StandardEnum.ASHRAE and not airspeed_control:
        to = (np.asarray(tdb, dtype="float64") + np.asarray(tr, dtype="float64")) / 2.0
        limited = _ashrae_airspeed_without_control(np.asarray(out["v"], dtype="float64"), to)
        out["v"] = float(limited) if np.ndim(v) == 0 else limited
    return out


def all_valid(checked: Dict[str, Number]) -> Union[bool, np.ndarray]:
    """check_standard_compliance の結果がすべて有効か（要素ごと）。"""
    masks = [~np.isnan(np.asarray(v, dtype="float64")) for v in checked.values()]
    result = np.logical_and.reduce(masks)
    return bool(result) if np.ndim(result) == 0 else result


__all__ = [
    "valid_range", "round_value", "check_standard_compliance", "all_valid",
    "ASHRAE_LIMITS", "ISO_LIMITS",
]
