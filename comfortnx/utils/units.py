from __future__ import annotations

from typing import Any, Dict

from ..config_types import UnitsEnum


# 温度として扱うキー（"tmp" を含むキーも温度扱い）
_TEMPERATURE_KEYS = {"tdb", "tr", "twb", "tg"}
_SPEED_KEYS = {"v", "vr", "vel"}

FT_PER_M = 3.281
FT2_PER_M2 = 10.764
PA_PER_ATM = 101325.0


def _is_temperature(key: str) -> bool:
    return key in _TEMPERATURE_KEYS or "tmp" in key


def units_converter(from_units: str = "IP", **kwargs: Any) -> Dict[str, Any]:
    """
    IP ⇔ SI の単位変換。キー名で物理量を判定し、変換後の dict を返す。
      - 温度: tdb, tr, *tmp*     [°F] ⇔ [°C]
      - 風速: v, vr, vel         [fps] ⇔ [m/s]
      - 面積: area               [ft2] ⇔ [m2]
      - 気圧: pressure           [atm] ⇔ [Pa]
    from_units="IP" なら IP→SI、"SI" なら SI→IP。
    スカラでも numpy 配列でもそのまま演算できる。未知のキーは変換せずに返す。
    """
    units = UnitsEnum.parse(from_units)
    out: Dict[str, Any] = {}
    for key, value in kwargs.items():
        if units is UnitsEnum.IP:
            if _is_temperature(key):
                out[key] = (value - 32) * 5 / 9
            elif key in _SPEED_KEYS:
                out[key] = value / FT_PER_M
            elif key == "area":
                out[key] = value / FT2_PER_M2
            elif key == "pressure":
                out[key] = value * PA_PER_ATM
            else:
                out[key] = value
        else:
            if _is_temperature(key):
                out[key] = value * 9 / 5 + 32
            elif key in _SPEED_KEYS:
                out[key] = value * FT_PER_M
            elif key == "area":
                out[key] = value * FT2_PER_M2
            elif key == "pressure":
                out[key] = value / PA_PER_ATM
            else:
                out[key] = value
    return out


__all__ = ["units_converter", "FT_PER_M", "FT2_PER_M2", "PA_PER_ATM"]
