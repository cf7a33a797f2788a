import math

import numpy as np


# 飽和水蒸気圧 [mmHg]（2ノードモデル用, Antoine型）
p_sat_torr = lambda t: math.exp(18.6686 - 4030.183 / (t + 235.0))

# 飽和水蒸気圧 [kPa]（ISO 7730 の PMV 用）
p_sat_kpa = lambda t: math.exp(16.6536 - 4030.183 / (t + 235.0))


_HYLAND_WEXLER = (
    -2836.5744,
    -6028.076559,
    19.54263612,
    -0.02737830188,
    0.000016261698,
    7.0229056e-10,
    -1.8680009e-13,
)


def p_sat_hpa(tdb):
    """
    飽和水蒸気圧 [hPa]（UTCI 用, Hyland-Wexler 型の近似）。
    スカラ・numpy 配列どちらも可。
    """
    tk = np.asarray(tdb, dtype="float64") + 273.15
    es = 2.7150305 * np.log(tk)
    for i, g in enumerate(_HYLAND_WEXLER):
        es = es + g * np.power(tk, i - 2)
    es = np.exp(es) * 0.01  # Pa → hPa
    return float(es) if np.ndim(es) == 0 else es


__all__ = ["p_sat_torr", "p_sat_kpa", "p_sat_hpa"]
