from __future__ import annotations

import numpy as np

from ..utils.arrays import as_float_array, broadcast_inputs, wrap_like
from ..utils.ranges import round_value


# Wind Chill Index [W/m2]（ASHRAE Handbook Fundamentals 2017, Chapter 9）
# 1.163 は kcal/(m2 h) → W/m2 の換算
wci = lambda tdb, v: (10.45 + 10 * np.sqrt(v) - v) * (33 - tdb) * 1.163


def wc(tdb: float, v: float, round: bool = True) -> dict:
    """
    風冷指数。tdb: 乾球温度 [°C], v: 地上 10m の風速 [m/s]。
    戻り値: {"wci": W/m2}
    例:
      wc(0, 0.1)  # {"wci": 518.6}
    """
    value = float(wci(float(tdb), float(v)))
    if round:
        value = round_value(value, 1)
    return {"wci": value}


def wc_array(tdb, v, round: bool = True) -> dict:
    """wc の配列版。戻り値: {"wci": ndarray | Series}"""
    cols = broadcast_inputs(tdb=tdb, v=v)
    out = wci(as_float_array(cols["tdb"], "tdb"), as_float_array(cols["v"], "v"))
    if round:
        out = round_value(out, 1)
    return {"wci": wrap_like(out, tdb, name="wci")}


__all__ = ["wc", "wc_array", "wci"]
