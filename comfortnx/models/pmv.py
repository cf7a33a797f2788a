from __future__ import annotations

import math
from typing import Dict, Optional

import numpy as np

from ..config_types import StandardEnum, TwoNodeConstants, UnitsEnum
from ..errors import ConvergenceError
from ..logger import get_logger
from ..utils.arrays import broadcast_inputs, wrap_like
from ..utils.psychrometrics import p_sat_kpa
from ..utils.ranges import all_valid, check_standard_compliance, round_value, valid_range
from ..utils.units import units_converter
from .cooling_effect import STILL_AIR_THRESHOLD, cooling_effect_si

logger = get_logger(__name__)


def pmv_ppd_optimized(tdb, tr, vr, rh, met, clo, wme=0.0, max_iter=150):
    """ISO 7730 の PMV 本体（着衣表面温度は反復で求める）。wme は [met]。"""
    pa = rh * 10 * p_sat_kpa(tdb)  # Pa
    icl = 0.155 * clo
    m = met * 58.15
    w = wme * 58.15
    mw = m - w
    f_cl = (1.00 + 1.290 * icl) if icl <= 0.078 else (1.05 + 0.645 * icl)

    hcf = 12.1 * math.sqrt(vr)
    hc = hcf
    taa = tdb + 273
    tra = tr + 273
    t_cla = taa + (35.5 - tdb) / (3.5 * icl + 0.1)

    p1 = icl * f_cl
    p2 = p1 * 3.96
    p3 = p1 * 100
    p4 = p1 * taa
    p5 = (308.7 - 0.028 * mw) + (p2 * (tra / 100.0) ** 4)
    xn = t_cla / 100
    xf = t_cla / 50
    eps = 0.00015

    n = 0
    while abs(xn - xf) > eps:
        xf = (xf + xn) / 2
        hcn = 2.38 * abs(100.0 * xf - taa) ** 0.25
        hc = max(hcf, hcn)
        xn = (p5 + p4 * hc - p2 * xf ** 4) / (100 + p3 * hc)
        n += 1
        if n > max_iter:
            raise ConvergenceError(f"PMV の着衣表面温度が {max_iter} 回で収束しませんでした")

    tcl = 100 * xn - 273

    hl1 = 3.05 * 0.001 * (5733 - (6.99 * mw) - pa)          # 皮膚からの拡散
    hl2 = 0.42 * (mw - 58.15) if mw > 58.15 else 0.0         # 発汗
    hl3 = 1.7 * 0.00001 * m * (5867 - pa)                    # 呼吸潜熱
    hl4 = 0.0014 * m * (34 - tdb)                            # 呼吸顕熱
    hl5 = 3.96 * f_cl * (xn ** 4 - (tra / 100.0) ** 4)       # 放射
    hl6 = f_cl * hc * (tcl - tdb)                            # 対流

    ts = 0.303 * math.exp(-0.036 * m) + 0.028
    return ts * (mw - hl1 - hl2 - hl3 - hl4 - hl5 - hl6)


def ppd_from_pmv(pmv):
    """PPD（Predicted Percentage of Dissatisfied）[%]。スカラ・配列どちらも可。"""
    pmv = np.asarray(pmv, dtype="float64")
    ppd = 100.0 - 95.0 * np.exp(-0.03353 * pmv ** 4.0 - 0.2179 * pmv ** 2.0)
    return float(ppd) if ppd.ndim == 0 else ppd


def _pmv_ppd_si(tdb, tr, vr, rh, met, clo, wme, standard, limit_inputs, airspeed_control,
                constants: Optional[TwoNodeConstants] = None):
    # ASHRAE: 0.1 m/s を超える気流は SET による冷却効果で置き換え、風速 0.1 m/s として PMV を計算する
    ce = 0.0
    if standard is StandardEnum.ASHRAE and vr > STILL_AIR_THRESHOLD:
        try:
            ce = cooling_effect_si(tdb, tr, vr, rh, met, clo, wme, constants)
        except (ConvergenceError, ArithmeticError) as e:
            logger.warning("冷却効果を計算できませんでした（0 とします）: %s", e)
            ce = 0.0
    vr_eff = STILL_AIR_THRESHOLD if ce > 0 else vr

    try:
        value = pmv_ppd_optimized(tdb - ce, tr - ce, vr_eff, rh, met, clo, wme)
    except (ConvergenceError, ArithmeticError, ValueError) as e:
        logger.warning("PMV を計算できませんでした（NaN を返します）: %s", e)
        value = math.nan
    ppd = ppd_from_pmv(value)

    if limit_inputs:
        checked = check_standard_compliance(
            standard, tdb=tdb, tr=tr, v=vr, met=met, clo=clo, airspeed_control=airspeed_control,
        )
        pmv_bounds = (-2.0, 2.0) if standard is StandardEnum.ISO else (-100.0, 100.0)
        if not all_valid(checked) or math.isnan(valid_range(value, pmv_bounds)):
            value, ppd = math.nan, math.nan
    return value, ppd


def pmv_ppd(
    tdb: float,
    tr: float,
    vr: float,
    rh: float,
    met: float,
    clo: float,
    wme: float = 0.0,
    standard: str = "ISO",
    units: str = "SI",
    limit_inputs: bool = True,
    airspeed_control: bool = True,
    round: bool = True,
    constants: Optional[TwoNodeConstants] = None,
) -> Dict[str, float]:
    """
    PMV（予測平均温冷感申告）と PPD（予測不満足者率）の算出。

    standard="ISO"   : ISO 7730-2005
    standard="ASHRAE": ASHRAE 55-2020。vr > 0.1 m/s では SET から冷却効果を求め、
                       tdb・tr から差し引き、風速 0.1 m/s として PMV を計算する。
    limit_inputs=True で規格の適用範囲外は NaN
      ASHRAE: 10 <= tdb, tr <= 40 °C, 0 <= vr <= 2 m/s, 1 <= met <= 4, 0 <= clo <= 1.5
      ISO   : 10 <= tdb <= 30, 10 <= tr <= 40 °C, 0 <= vr <= 1 m/s, 0.8 <= met <= 4, 0 <= clo <= 2, -2 <= PMV <= 2
    airspeed_control=False（ASHRAE のみ）: 在室者が風速を調整できない場合の上限を適用する。
    constants: 冷却効果の計算に使う2ノードモデルの定数（省略時は既定値）
    戻り値: {"pmv": float, "ppd": float}（round=True で pmv 小数2桁, ppd 小数1桁）
    """
    std = StandardEnum.parse(standard)
    u = UnitsEnum.parse(units)
    if u is UnitsEnum.IP:
        conv = units_converter(from_units="IP", tdb=tdb, tr=tr, vr=vr)
        tdb, tr, vr = conv["tdb"], conv["tr"], conv["vr"]

    value, ppd = _pmv_ppd_si(
        float(tdb), float(tr), float(vr), float(rh), float(met), float(clo), float(wme or 0.0),
        std, limit_inputs, airspeed_control, constants,
    )
    if round:
        value, ppd = round_value(value, 2), round_value(ppd, 1)
    return {"pmv": value, "ppd": ppd}


def pmv_ppd_array(
    tdb,
    tr,
    vr,
    rh,
    met,
    clo,
    wme=0.0,
    standard: str = "ISO",
    units: str = "SI",
    limit_inputs: bool = True,
    airspeed_control: bool = True,
    round: bool = True,
    constants: Optional[TwoNodeConstants] = None,
):
    """pmv_ppd の配列版。戻り値は {"pmv": array, "ppd": array}（Series 入力なら Series）。"""
    cols = broadcast_inputs(tdb=tdb, tr=tr, vr=vr, rh=rh, met=met, clo=clo, wme=wme)
    pmvs, ppds = [], []
    for i in range(len(cols["tdb"])):
        out = pmv_ppd(
            cols["tdb"][i], cols["tr"][i], cols["vr"][i], cols["rh"][i],
            cols["met"][i], cols["clo"][i], cols["wme"][i],
            standard=standard, units=units, limit_inputs=limit_inputs,
            airspeed_control=airspeed_control, round=round, constants=constants,
        )
        pmvs.append(out["pmv"])
        ppds.append(out["ppd"])
    return {"pmv": wrap_like(pmvs, tdb, name="pmv"), "ppd": wrap_like(ppds, tdb, name="ppd")}


def pmv(tdb, tr, vr, rh, met, clo, wme=0.0, standard="ISO", **kwargs) -> float:
    """PMV のみを返す（引数は pmv_ppd と同じ）。"""
    return pmv_ppd(tdb, tr, vr, rh, met, clo, wme, standard, **kwargs)["pmv"]


def pmv_array(tdb, tr, vr, rh, met, clo, wme=0.0, standard="ISO", **kwargs):
    """PMV のみを返す配列版。"""
    return pmv_ppd_array(tdb, tr, vr, rh, met, clo, wme, standard, **kwargs)["pmv"]


__all__ = ["pmv_ppd", "pmv_ppd_array", "pmv", "pmv_array", "ppd_from_pmv", "pmv_ppd_optimized"]
