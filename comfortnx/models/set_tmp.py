from __future__ import annotations

import math
from typing import Any, Dict, Optional, Union

from ..config_types import EnvironmentalInput, SetOptions, TwoNodeConstants, UnitsEnum
from ..errors import ConvergenceError
from ..logger import get_logger
from ..utils.arrays import broadcast_inputs, wrap_like
from ..utils.ranges import round_value
from ..utils.units import units_converter
from .two_nodes import is_physical, normalize_inputs, set_from_environment, within_limits

logger = get_logger(__name__)

OptionsType = Union[None, Dict[str, Any], SetOptions]


def _set_tmp_si(
    env: EnvironmentalInput,
    limit_inputs: bool,
    calculate_ce: bool,
    constants: Optional[TwoNodeConstants] = None,
) -> float:
    """SI 入力1件分の SET [°C]。範囲外・計算不能は NaN。"""
    if not is_physical(env):
        return math.nan
    if limit_inputs and not within_limits(env):
        return math.nan
    return set_from_environment(env, calculate_ce=calculate_ce, constants=constants)


def _finalize(value: float, units: UnitsEnum, opts: SetOptions) -> float:
    if units is UnitsEnum.IP and not math.isnan(value):
        value = units_converter(from_units="SI", tmp=value)["tmp"]
    if opts.round:
        value = round_value(value, 1)
    return value


def set_tmp(
    tdb: float,
    tr: float,
    v: float,
    rh: float,
    met: float,
    clo: float,
    wme: float = 0.0,
    body_surface_area: Optional[float] = None,
    p_atm: Optional[float] = None,
    body_position: str = "standing",
    units: str = "SI",
    limit_inputs: bool = True,
    options: OptionsType = None,
    constants: Optional[TwoNodeConstants] = None,
) -> float:
    """
    SET（Standard Effective Temperature, 標準新有効温度）の算出。

    引数:
      tdb, tr: 乾球温度・平均放射温度 [°C]（units="IP" なら [°F]）
      v: 風速 [m/s]（IP なら [fps]）
      rh: 相対湿度 [%]
      met, clo: 代謝量 [met]・着衣量 [clo]
      wme: 外部仕事 [met]
      body_surface_area: 体表面積 [m2]（IP なら [ft2]）。省略時は 1.8258 m2
      p_atm: 大気圧 [Pa]（IP なら [atm]）。省略時は標準気圧
      body_position: "standing" / "sitting" / "lying"
      limit_inputs: True なら ASHRAE 55 の適用範囲外で NaN を返す
        （10 <= tdb, tr <= 40 °C, 0 <= v <= 2 m/s, 1 <= met <= 4, 0 <= clo <= 1.5）
      options: {"round": bool, "calculate_ce": bool}
        round=True で小数1桁に丸める。
        calculate_ce=True で冷却効果算定用の SET（代謝による対流を含めない）を返す。
    戻り値:
      SET（入力と同じ単位系）。範囲外・計算不能なら NaN。
    例:
      set_tmp(25, 25, 0.1, 50, 1.2, 0.5)  # 24.3
    """
    opts = SetOptions.from_value(options)
    env, u = normalize_inputs(
        tdb, tr, v, rh, met, clo, wme,
        body_surface_area=body_surface_area, p_atm=p_atm,
        body_position=body_position, units=units,
    )
    try:
        value = _set_tmp_si(env, limit_inputs, opts.calculate_ce, constants)
    except (ConvergenceError, ArithmeticError) as e:
        logger.warning("SET を計算できませんでした（NaN を返します）: %s", e)
        value = math.nan
    return _finalize(value, u, opts)


def set_tmp_array(
    tdb,
    tr,
    v,
    rh,
    met,
    clo,
    wme=0.0,
    body_surface_area=None,
    p_atm=None,
    body_position="standing",
    units: str = "SI",
    limit_inputs: bool = True,
    options: OptionsType = None,
    constants: Optional[TwoNodeConstants] = None,
):
    """
    set_tmp の配列版。各引数は同じ長さのシーケンス（list / ndarray / Series）かスカラ。
    要素ごとに独立して計算し、ある要素の NaN や計算失敗は他の要素に影響しない。
    配列の長さが一致しない場合は ArrayLengthError。
    戻り値は ndarray（tdb が pandas.Series なら同じ index の Series）。
    """
    opts = SetOptions.from_value(options)
    cols = broadcast_inputs(
        tdb=tdb, tr=tr, v=v, rh=rh, met=met, clo=clo, wme=wme,
        body_surface_area=body_surface_area, p_atm=p_atm, body_position=body_position,
    )
    n = len(cols["tdb"])

    results = []
    n_failed = 0
    for i in range(n):
        env, u = normalize_inputs(
            cols["tdb"][i], cols["tr"][i], cols["v"][i], cols["rh"][i],
            cols["met"][i], cols["clo"][i], cols["wme"][i],
            body_surface_area=cols["body_surface_area"][i],
            p_atm=cols["p_atm"][i],
            body_position=cols["body_position"][i],
            units=units,
        )
        try:
            value = _set_tmp_si(env, limit_inputs, opts.calculate_ce, constants)
        except (ConvergenceError, ArithmeticError) as e:
            logger.warning("%d 番目の SET を計算できませんでした（NaN とします）: %s", i, e)
            value = math.nan
            n_failed += 1
        results.append(_finalize(value, u, opts))

    logger.debug("SET を %d 件計算しました（計算失敗 %d 件）", n, n_failed)
    return wrap_like(results, tdb, name="set")


__all__ = ["set_tmp", "set_tmp_array"]
