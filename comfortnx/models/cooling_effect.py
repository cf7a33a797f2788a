from __future__ import annotations

import math
from typing import Optional

from ..config_types import TwoNodeConstants, UnitsEnum
from ..errors import ConvergenceError
from ..logger import get_logger
from ..utils.arrays import broadcast_inputs, wrap_like
from ..utils.units import units_converter
from .two_nodes import normalize_inputs, set_from_environment

logger = get_logger(__name__)

STILL_AIR_THRESHOLD = 0.1  # m/s
CE_BRACKET = (0.0, 40.0)   # °C
CE_TOLERANCE = 1e-4
CE_MAX_ITER = 100


def _bisect(func, low: float, high: float, tol: float, max_iter: int) -> Optional[float]:
    """
    区間 [low, high] で func の符号が変わる点を二分法で求める。
    端点で符号が変わらなければ None。
    """
    f_low = func(low)
    f_high = func(high)
    if f_low == 0.0:
        return low
    if f_high == 0.0:
        return high
    if f_low * f_high > 0:
        return None

    mid = (low + high) / 2.0
    for _ in range(max_iter):
        mid = (low + high) / 2.0
        f_mid = func(mid)
        if f_mid == 0.0 or (high - low) / 2.0 < tol:
            return mid
        if f_low * f_mid < 0:
            high = mid
        else:
            low, f_low = mid, f_mid
    logger.warning("冷却効果の二分法が %d 回で収束しませんでした（%.4f を返します）", max_iter, mid)
    return mid


def cooling_effect_si(
    tdb: float, tr: float, vr: float, rh: float, met: float, clo: float, wme: float,
    constants: Optional[TwoNodeConstants] = None,
) -> float:
    """SI 入力の冷却効果 [°C]（丸めなし）。PMV（ASHRAE）からも使う。"""
    if vr <= STILL_AIR_THRESHOLD:
        return 0.0

    env, _ = normalize_inputs(tdb, tr, vr, rh, met, clo, wme)
    initial_set = set_from_environment(env, calculate_ce=True, constants=constants)

    def set_difference(x: float) -> float:
        still, _ = normalize_inputs(tdb - x, tr - x, STILL_AIR_THRESHOLD, rh, met, clo, wme)
        return set_from_environment(still, calculate_ce=True, constants=constants) - initial_set

    ce = _bisect(set_difference, CE_BRACKET[0], CE_BRACKET[1], CE_TOLERANCE, CE_MAX_ITER)
    if ce is None:
        logger.warning(
            "冷却効果を求められませんでした。冷却効果=0 とします (tdb=%s, tr=%s, vr=%s)", tdb, tr, vr,
        )
        return 0.0
    return ce


def cooling_effect(
    tdb: float,
    tr: float,
    vr: float,
    rh: float,
    met: float,
    clo: float,
    wme: float = 0.0,
    units: str = "SI",
    constants: Optional[TwoNodeConstants] = None,
) -> float:
    """
    気流による冷却効果（CE）[°C]（IP なら [°F] の温度差）。
    実環境の SET と、tdb・tr から CE を差し引いて風速 0.1 m/s とした環境の SET が
    等しくなる CE を [0, 40] °C の範囲で二分法により求める（ASHRAE 55-2020 Appendix D）。
    vr <= 0.1 m/s なら 0。
    """
    u = UnitsEnum.parse(units)
    if u is UnitsEnum.IP:
        conv = units_converter(from_units="IP", tdb=tdb, tr=tr, vr=vr)
        tdb, tr, vr = conv["tdb"], conv["tr"], conv["vr"]

    try:
        ce = cooling_effect_si(tdb, tr, vr, rh, met, clo, wme, constants)
    except (ConvergenceError, ArithmeticError) as e:
        logger.warning("冷却効果を計算できませんでした（0 とします）: %s", e)
        ce = 0.0

    if u is UnitsEnum.IP:
        # 温度差なので 1.8 倍のみ
        ce = ce * 1.8
    return round(ce, 2)


def cooling_effect_array(tdb, tr, vr, rh, met, clo, wme=0.0, units: str = "SI",
                         constants: Optional[TwoNodeConstants] = None):
    """cooling_effect の配列版（要素ごとに独立して計算）。"""
    cols = broadcast_inputs(tdb=tdb, tr=tr, vr=vr, rh=rh, met=met, clo=clo, wme=wme)
    out = [
        cooling_effect(
            cols["tdb"][i], cols["tr"][i], cols["vr"][i], cols["rh"][i],
            cols["met"][i], cols["clo"][i], cols["wme"][i], units=units, constants=constants,
        )
        for i in range(len(cols["tdb"]))
    ]
    return wrap_like(out, tdb, name="ce")


__all__ = ["cooling_effect", "cooling_effect_array", "cooling_effect_si", "STILL_AIR_THRESHOLD"]
