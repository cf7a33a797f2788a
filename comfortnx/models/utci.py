from __future__ import annotations

from typing import Union

import numpy as np
import pandas as pd

from ..config_types import UnitsEnum
from ..utils.arrays import as_float_array, broadcast_inputs, wrap_like
from ..utils.psychrometrics import p_sat_hpa
from ..utils.ranges import round_value, valid_range
from ..utils.units import units_converter


# UTCI の熱ストレス区分 (下限, 上限]
STRESS_CATEGORIES = {
    "extreme cold stress": (-np.inf, -40.0),
    "very strong cold stress": (-40.0, -27.0),
    "strong cold stress": (-27.0, -13.0),
    "moderate cold stress": (-13.0, 0.0),
    "slight cold stress": (0.0, 9.0),
    "no thermal stress": (9.0, 26.0),
    "moderate heat stress": (26.0, 32.0),
    "strong heat stress": (32.0, 38.0),
    "very strong heat stress": (38.0, 46.0),
    "extreme heat stress": (46.0, 1000.0),
}

# 6次の回帰多項式（Bröde et al. 2012）
# (係数, tdb の次数, v の次数, tr - tdb の次数, 水蒸気圧[kPa] の次数)
_UTCI_TERMS = (
    (1.0, 1, 0, 0, 0),
    (0.607562052, 0, 0, 0, 0),
    (-0.0227712343, 1, 0, 0, 0),
    (8.06470249e-4, 2, 0, 0, 0),
    (-1.54271372e-4, 3, 0, 0, 0),
    (-3.24651735e-6, 4, 0, 0, 0),
    (7.32602852e-8, 5, 0, 0, 0),
    (1.35959073e-9, 6, 0, 0, 0),
    (-2.2583652, 0, 1, 0, 0),
    (0.0880326035, 1, 1, 0, 0),
    (0.00216844454, 2, 1, 0, 0),
    (-1.53347087e-5, 3, 1, 0, 0),
    (-5.72983704e-7, 4, 1, 0, 0),
    (-2.55090145e-9, 5, 1, 0, 0),
    (-0.751269505, 0, 2, 0, 0),
    (-0.00408350271, 1, 2, 0, 0),
    (-5.21670675e-5, 2, 2, 0, 0),
    (1.94544667e-6, 3, 2, 0, 0),
    (1.14099531e-8, 4, 2, 0, 0),
    (0.158137256, 0, 3, 0, 0),
    (-6.57263143e-5, 1, 3, 0, 0),
    (2.22697524e-7, 2, 3, 0, 0),
    (-4.16117031e-8, 3, 3, 0, 0),
    (-0.0127762753, 0, 4, 0, 0),
    (9.66891875e-6, 1, 4, 0, 0),
    (2.52785852e-9, 2, 4, 0, 0),
    (4.56306672e-4, 0, 5, 0, 0),
    (-1.74202546e-7, 1, 5, 0, 0),
    (-5.91491269e-6, 0, 6, 0, 0),
    (0.398374029, 0, 0, 1, 0),
    (1.83945314e-4, 1, 0, 1, 0),
    (-1.7375451e-4, 2, 0, 1, 0),
    (-7.60781159e-7, 3, 0, 1, 0),
    (3.77830287e-8, 4, 0, 1, 0),
    (5.43079673e-10, 5, 0, 1, 0),
    (-0.0200518269, 0, 1, 1, 0),
    (8.92859837e-4, 1, 1, 1, 0),
    (3.45433048e-6, 2, 1, 1, 0),
    (-3.77925774e-7, 3, 1, 1, 0),
    (-1.69699377e-9, 4, 1, 1, 0),
    (1.69992415e-4, 0, 2, 1, 0),
    (-4.99204314e-5, 1, 2, 1, 0),
    (2.47417178e-7, 2, 2, 1, 0),
    (1.07596466e-8, 3, 2, 1, 0),
    (8.49242932e-5, 0, 3, 1, 0),
    (1.35191328e-6, 1, 3, 1, 0),
    (-6.21531254e-9, 2, 3, 1, 0),
    (-4.99410301e-6, 0, 4, 1, 0),
    (-1.89489258e-8, 1, 4, 1, 0),
    (8.15300114e-8, 0, 5, 1, 0),
    (7.5504309e-4, 0, 0, 2, 0),
    (-5.65095215e-5, 1, 0, 2, 0),
    (-4.52166564e-7, 2, 0, 2, 0),
    (2.46688878e-8, 3, 0, 2, 0),
    (2.42674348e-10, 4, 0, 2, 0),
    (1.5454725e-4, 0, 1, 2, 0),
    (5.2411097e-6, 1, 1, 2, 0),
    (-8.75874982e-8, 2, 1, 2, 0),
    (-1.50743064e-9, 3, 1, 2, 0),
    (-1.56236307e-5, 0, 2, 2, 0),
    (-1.33895614e-7, 1, 2, 2, 0),
    (2.49709824e-9, 2, 2, 2, 0),
    (6.51711721e-7, 0, 3, 2, 0),
    (1.94960053e-9, 1, 3, 2, 0),
    (-1.00361113e-8, 0, 4, 2, 0),
    (-1.21206673e-5, 0, 0, 3, 0),
    (-2.1820366e-7, 1, 0, 3, 0),
    (7.51269482e-9, 2, 0, 3, 0),
    (9.79063848e-11, 3, 0, 3, 0),
    (1.25006734e-6, 0, 1, 3, 0),
    (-1.81584736e-9, 1, 1, 3, 0),
    (-3.52197671e-10, 2, 1, 3, 0),
    (-3.3651463e-8, 0, 2, 3, 0),
    (1.35908359e-10, 1, 2, 3, 0),
    (4.1703262e-10, 0, 3, 3, 0),
    (-1.30369025e-9, 0, 0, 4, 0),
    (4.13908461e-10, 1, 0, 4, 0),
    (9.22652254e-12, 2, 0, 4, 0),
    (-5.08220384e-9, 0, 1, 4, 0),
    (-2.24730961e-11, 1, 1, 4, 0),
    (1.17139133e-10, 0, 2, 4, 0),
    (6.62154879e-10, 0, 0, 5, 0),
    (4.0386326e-13, 1, 0, 5, 0),
    (1.95087203e-12, 0, 1, 5, 0),
    (-4.73602469e-12, 0, 0, 6, 0),
    (5.12733497, 0, 0, 0, 1),
    (-0.312788561, 1, 0, 0, 1),
    (-0.0196701861, 2, 0, 0, 1),
    (9.9969087e-4, 3, 0, 0, 1),
    (9.51738512e-6, 4, 0, 0, 1),
    (-4.66426341e-7, 5, 0, 0, 1),
    (0.548050612, 0, 1, 0, 1),
    (-0.00330552823, 1, 1, 0, 1),
    (-0.0016411944, 2, 1, 0, 1),
    (-5.16670694e-6, 3, 1, 0, 1),
    (9.52692432e-7, 4, 1, 0, 1),
    (-0.0429223622, 0, 2, 0, 1),
    (0.00500845667, 1, 2, 0, 1),
    (1.00601257e-6, 2, 2, 0, 1),
    (-1.81748644e-6, 3, 2, 0, 1),
    (-1.25813502e-3, 0, 3, 0, 1),
    (-1.79330391e-4, 1, 3, 0, 1),
    (2.34994441e-6, 2, 3, 0, 1),
    (1.29735808e-4, 0, 4, 0, 1),
    (1.2906487e-6, 1, 4, 0, 1),
    (-2.28558686e-6, 0, 5, 0, 1),
    (-0.0369476348, 0, 0, 1, 1),
    (0.00162325322, 1, 0, 1, 1),
    (-3.1427968e-5, 2, 0, 1, 1),
    (2.59835559e-6, 3, 0, 1, 1),
    (-4.77136523e-8, 4, 0, 1, 1),
    (8.6420339e-3, 0, 1, 1, 1),
    (-6.87405181e-4, 1, 1, 1, 1),
    (-9.13863872e-6, 2, 1, 1, 1),
    (5.15916806e-7, 3, 1, 1, 1),
    (-3.59217476e-5, 0, 2, 1, 1),
    (3.28696511e-5, 1, 2, 1, 1),
    (-7.10542454e-7, 2, 2, 1, 1),
    (-1.243823e-5, 0, 3, 1, 1),
    (-7.385844e-9, 1, 3, 1, 1),
    (2.20609296e-7, 0, 4, 1, 1),
    (-7.3246918e-4, 0, 0, 2, 1),
    (-1.87381964e-5, 1, 0, 2, 1),
    (4.80925239e-6, 2, 0, 2, 1),
    (-8.7549204e-8, 3, 0, 2, 1),
    (2.7786293e-5, 0, 1, 2, 1),
    (-5.06004592e-6, 1, 1, 2, 1),
    (1.14325367e-7, 2, 1, 2, 1),
    (2.53016723e-6, 0, 2, 2, 1),
    (-1.72857035e-8, 1, 2, 2, 1),
    (-3.95079398e-8, 0, 3, 2, 1),
    (-3.59413173e-7, 0, 0, 3, 1),
    (7.04388046e-7, 1, 0, 3, 1),
    (-1.89309167e-8, 2, 0, 3, 1),
    (-4.79768731e-7, 0, 1, 3, 1),
    (7.96079978e-9, 1, 1, 3, 1),
    (1.62897058e-9, 0, 2, 3, 1),
    (3.94367674e-8, 0, 0, 4, 1),
    (-1.18566247e-9, 1, 0, 4, 1),
    (3.34678041e-10, 0, 1, 4, 1),
    (-1.15606447e-10, 0, 0, 5, 1),
    (-2.80626406, 0, 0, 0, 2),
    (0.548712484, 1, 0, 0, 2),
    (-0.0039942841, 2, 0, 0, 2),
    (-9.54009191e-4, 3, 0, 0, 2),
    (1.93090978e-5, 4, 0, 0, 2),
    (-0.308806365, 0, 1, 0, 2),
    (0.0116952364, 1, 1, 0, 2),
    (4.95271903e-4, 2, 1, 0, 2),
    (-1.90710882e-5, 3, 1, 0, 2),
    (0.00210787756, 0, 2, 0, 2),
    (-6.98445738e-4, 1, 2, 0, 2),
    (2.30109073e-5, 2, 2, 0, 2),
    (4.1785659e-4, 0, 3, 0, 2),
    (-1.27043871e-5, 1, 3, 0, 2),
    (-3.04620472e-6, 0, 4, 0, 2),
    (0.0514507424, 0, 0, 1, 2),
    (-0.00432510997, 1, 0, 1, 2),
    (8.99281156e-5, 2, 0, 1, 2),
    (-7.14663943e-7, 3, 0, 1, 2),
    (-2.66016305e-4, 0, 1, 1, 2),
    (2.63789586e-4, 1, 1, 1, 2),
    (-7.01199003e-6, 2, 1, 1, 2),
    (-1.06823306e-4, 0, 2, 1, 2),
    (3.61341136e-6, 1, 2, 1, 2),
    (2.29748967e-7, 0, 3, 1, 2),
    (3.04788893e-4, 0, 0, 2, 2),
    (-6.42070836e-5, 1, 0, 2, 2),
    (1.16257971e-6, 2, 0, 2, 2),
    (7.68023384e-6, 0, 1, 2, 2),
    (-5.47446896e-7, 1, 1, 2, 2),
    (-3.5993791e-8, 0, 2, 2, 2),
    (-4.36497725e-6, 0, 0, 3, 2),
    (1.68737969e-7, 1, 0, 3, 2),
    (2.67489271e-8, 0, 1, 3, 2),
    (3.23926897e-9, 0, 0, 4, 2),
    (-0.0353874123, 0, 0, 0, 3),
    (-0.22120119, 1, 0, 0, 3),
    (0.0155126038, 2, 0, 0, 3),
    (-2.63917279e-4, 3, 0, 0, 3),
    (0.0453433455, 0, 1, 0, 3),
    (-0.00432943862, 1, 1, 0, 3),
    (1.45389826e-4, 2, 1, 0, 3),
    (2.1750861e-4, 0, 2, 0, 3),
    (-6.66724702e-5, 1, 2, 0, 3),
    (3.3321714e-5, 0, 3, 0, 3),
    (-0.00226921615, 0, 0, 1, 3),
    (3.80261982e-4, 1, 0, 1, 3),
    (-5.45314314e-9, 2, 0, 1, 3),
    (-7.96355448e-4, 0, 1, 1, 3),
    (2.53458034e-5, 1, 1, 1, 3),
    (-6.31223658e-6, 0, 2, 1, 3),
    (3.02122035e-4, 0, 0, 2, 3),
    (-4.77403547e-6, 1, 0, 2, 3),
    (1.73825715e-6, 0, 1, 2, 3),
    (-4.09087898e-7, 0, 0, 3, 3),
    (0.614155345, 0, 0, 0, 4),
    (-0.0616755931, 1, 0, 0, 4),
    (0.00133374846, 2, 0, 0, 4),
    (0.00355375387, 0, 1, 0, 4),
    (-5.13027851e-4, 1, 1, 0, 4),
    (1.02449757e-4, 0, 2, 0, 4),
    (-0.00148526421, 0, 0, 1, 4),
    (-4.11469183e-5, 1, 0, 1, 4),
    (-6.80434415e-6, 0, 1, 1, 4),
    (-9.77675906e-6, 0, 0, 2, 4),
    (0.0882773108, 0, 0, 0, 5),
    (-0.00301859306, 1, 0, 0, 5),
    (0.00104452989, 0, 1, 0, 5),
    (2.47090539e-4, 0, 0, 1, 5),
    (0.00148348065, 0, 0, 0, 6),
)

_COEF = np.array([t[0] for t in _UTCI_TERMS], dtype="float64")
_POWERS = np.array([t[1:] for t in _UTCI_TERMS], dtype="float64")


def utci_optimized(tdb, v, delta_t_tr, pa) -> np.ndarray:
    """回帰多項式の評価（SI, 配列可）。"""
    x = np.stack(np.broadcast_arrays(
        np.asarray(tdb, dtype="float64"),
        np.asarray(v, dtype="float64"),
        np.asarray(delta_t_tr, dtype="float64"),
        np.asarray(pa, dtype="float64"),
    ), axis=-1)
    # 各項 = 係数 * Π x_k ** p_k
    terms = np.prod(np.power(x[..., np.newaxis, :], _POWERS), axis=-1)
    return terms @ _COEF


def stress_category(value: float) -> Union[str, None]:
    """UTCI 値を熱ストレス区分へ割り当てる（NaN は None）。"""
    for name, (low, high) in STRESS_CATEGORIES.items():
        if low < value <= high:
            return name
    return None


def _utci_si(tdb: np.ndarray, tr: np.ndarray, v: np.ndarray, rh: np.ndarray, limit_inputs: bool) -> np.ndarray:
    pa = p_sat_hpa(tdb) * (rh / 100.0) / 10.0  # hPa → kPa
    delta_t_tr = tr - tdb
    out = np.atleast_1d(utci_optimized(tdb, v, delta_t_tr, pa))

    if limit_inputs:
        valid = (
            ~np.isnan(valid_range(tdb, (-50.0, 50.0)))
            & ~np.isnan(valid_range(delta_t_tr, (-30.0, 70.0)))
            & ~np.isnan(valid_range(v, (0.5, 17.0)))
        )
        out = np.where(valid, out, np.nan)
    return out


def utci_array(
    tdb,
    tr,
    v,
    rh,
    units: str = "SI",
    return_stress_category: bool = False,
    limit_inputs: bool = True,
):
    """
    UTCI（Universal Thermal Climate Index）の配列版。
    v は地上 10m の風速。limit_inputs=True では
    -50 <= tdb <= 50 °C, -30 <= tr - tdb <= 70 °C, 0.5 <= v <= 17 m/s の範囲外を NaN にする。
    return_stress_category=True なら {"utci": ..., "stress_category": [...]} を返す。
    """
    cols = broadcast_inputs(tdb=tdb, tr=tr, v=v, rh=rh)
    t = as_float_array(cols["tdb"], "tdb")
    r = as_float_array(cols["tr"], "tr")
    w = as_float_array(cols["v"], "v")
    h = as_float_array(cols["rh"], "rh")

    u = UnitsEnum.parse(units)
    if u is UnitsEnum.IP:
        conv = units_converter(from_units="IP", tdb=t, tr=r, v=w)
        t, r, w = conv["tdb"], conv["tr"], conv["v"]

    out = _utci_si(t, r, w, h, limit_inputs)
    if u is UnitsEnum.IP:
        out = units_converter(from_units="SI", tmp=out)["tmp"]
    out = round_value(out, 1)

    result = wrap_like(out, tdb, name="utci")
    if return_stress_category:
        categories = [stress_category(x) for x in out]
        if isinstance(tdb, pd.Series):
            categories = pd.Series(categories, index=tdb.index, name="stress_category")
        return {"utci": result, "stress_category": categories}
    return result


def utci(
    tdb: float,
    tr: float,
    v: float,
    rh: float,
    units: str = "SI",
    return_stress_category: bool = False,
    limit_inputs: bool = True,
):
    """
    UTCI のスカラ版。
    例:
      utci(25, 25, 1.0, 50)          # 24.6
      utci(77, 77, 3.28, 50, "IP")   # 76.4
    """
    out = utci_array([tdb], [tr], [v], [rh], units=units, return_stress_category=return_stress_category,
                     limit_inputs=limit_inputs)
    if return_stress_category:
        return {"utci": float(out["utci"][0]), "stress_category": out["stress_category"][0]}
    return float(out[0])


__all__ = ["utci", "utci_array", "utci_optimized", "stress_category", "STRESS_CATEGORIES"]
