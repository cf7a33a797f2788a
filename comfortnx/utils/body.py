from __future__ import annotations

import numpy as np


def body_surface_area(weight: float, height: float, formula: str = "dubois") -> float:
    """
    体表面積 [m2]。weight [kg], height [m]。
    formula: "dubois"（既定）/ "takahira" / "fujimoto" / "kurazumi"
    """
    formula = formula.lower()
    if formula == "dubois":
        return 0.202 * (weight ** 0.425) * (height ** 0.725)
    if formula == "takahira":
        return 0.2042 * (weight ** 0.425) * (height ** 0.725)
    if formula == "fujimoto":
        return 0.1882 * (weight ** 0.444) * (height ** 0.663)
    if formula == "kurazumi":
        return 0.2440 * (weight ** 0.383) * (height ** 0.693)
    raise ValueError(f"未対応の体表面積式です: {formula!r}")


def v_relative(v, met):
    """
    身体の動きを考慮した相対風速 [m/s]。met > 1 のとき v + 0.3*(met-1)。
    スカラ・配列どちらも可。
    """
    v = np.asarray(v, dtype="float64")
    met = np.asarray(met, dtype="float64")
    out = np.where(met > 1, np.around(v + 0.3 * (met - 1), 3), v)
    return float(out) if out.ndim == 0 else out


def clo_dynamic(clo, met, standard: str = "ASHRAE"):
    """
    動作による着衣量の低減。ASHRAE は met > 1.2、ISO は met > 1 で clo*(0.6+0.4/met)。
    """
    threshold = 1.2 if standard.lower() == "ashrae" else 1.0
    clo = np.asarray(clo, dtype="float64")
    met = np.asarray(met, dtype="float64")
    out = np.where(met > threshold, np.around(clo * (0.6 + 0.4 / met), 3), clo)
    return float(out) if out.ndim == 0 else out


__all__ = ["body_surface_area", "v_relative", "clo_dynamic"]
