from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Optional, Union

from .errors import OptionError


class UnitsEnum(str, Enum):
    SI = "si"
    IP = "ip"

    @classmethod
    def parse(cls, value: Union[str, "UnitsEnum"]) -> "UnitsEnum":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise OptionError(f"units は 'SI' か 'IP' を指定してください: {value!r}") from None


class BodyPositionEnum(str, Enum):
    STANDING = "standing"
    SITTING = "sitting"
    LYING = "lying"

    @classmethod
    def parse(cls, value: Union[str, "BodyPositionEnum", None]) -> "BodyPositionEnum":
        if value is None:
            return cls(DEFAULT_BODY_POSITION)
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise OptionError(f"body_position は standing / sitting / lying のいずれかです: {value!r}") from None


class StandardEnum(str, Enum):
    ISO = "iso"
    ASHRAE = "ashrae"

    @classmethod
    def parse(cls, value: Union[str, "StandardEnum"]) -> "StandardEnum":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise OptionError(f"standard は 'ISO' か 'ASHRAE' を指定してください: {value!r}") from None


# 省略時の既定値（SI / IP）
DEFAULT_BODY_SURFACE_AREA = 1.8258   # m2（DuBois式, 70kg・1.73m）
DEFAULT_BODY_SURFACE_AREA_IP = 19.65 # ft2
DEFAULT_P_ATM = 101325.0             # Pa
DEFAULT_P_ATM_IP = 1.0               # atm
DEFAULT_BODY_POSITION = "standing"


@dataclass(frozen=True)
class SetOptions:
    """set_tmp の出力オプション。"""
    round: bool = True
    calculate_ce: bool = False

    @classmethod
    def from_value(cls, value: Union[None, Dict[str, Any], "SetOptions"]) -> "SetOptions":
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if not isinstance(value, dict):
            raise OptionError(f"options は dict か SetOptions を指定してください: {type(value).__name__}")

        allowed = {f.name for f in fields(cls)}
        unknown = sorted(k for k in value if k not in allowed)
        if unknown:
            raise OptionError(f"options に未定義のキーがあります: {unknown}")
        for k, v in value.items():
            if not isinstance(v, bool):
                raise OptionError(f"options['{k}'] は bool を指定してください: {v!r}")
        return cls(**value)


@dataclass(frozen=True)
class EnvironmentalInput:
    """環境・人体側の入力（内部では常に SI）。"""
    tdb: float
    tr: float
    v: float
    rh: float
    met: float
    clo: float
    wme: float = 0.0
    body_surface_area: float = DEFAULT_BODY_SURFACE_AREA
    p_atm: float = DEFAULT_P_ATM
    body_position: BodyPositionEnum = BodyPositionEnum.STANDING


@dataclass(frozen=True)
class TwoNodeConstants:
    """
    2ノードモデルの定数（ASHRAE 55-2020 / Gagge et al. 1986）。
    研究用途で値を変えたい場合は dataclasses.replace で複製して渡す。
    """
    body_weight: float = 70.0             # kg
    met_factor: float = 58.2              # W/m2 per met
    sbc: float = 5.6697e-8                # Stefan-Boltzmann W/(m2K4)
    c_sw: float = 170.0                   # 発汗の駆動係数
    c_dil: float = 120.0                  # 血管拡張の駆動係数
    c_str: float = 0.5                    # 血管収縮の駆動係数
    temp_skin_neutral: float = 33.7
    temp_core_neutral: float = 36.8
    alfa_neutral: float = 0.1
    skin_blood_flow_neutral: float = 6.3  # L/(m2 h)
    max_skin_blood_flow: float = 90.0
    min_skin_blood_flow: float = 0.5
    max_sweating: float = 500.0           # g/(m2 h)
    length_time_simulation: int = 60      # 1分刻みの計算回数
    t_cl_tolerance: float = 0.01
    t_cl_max_iter: int = 150
    set_tolerance: float = 0.01
    set_max_iter: int = 100
    # 有効放射面積比 A_r/A_D
    radiant_area_ratio: Dict[str, float] = field(
        default_factory=lambda: {"sitting": 0.7, "standing": 0.73, "lying": 0.73}
    )


@dataclass
class PhysiologicalState:
    """1回のシミュレーション内でのみ使う生理状態。"""
    t_core: float
    t_skin: float
    m_bl: float
    m_rsw: float = 0.0
    w: float = 0.0
    alfa: float = 0.1

    @classmethod
    def neutral(cls, constants: Optional[TwoNodeConstants] = None) -> "PhysiologicalState":
        c = constants or TwoNodeConstants()
        return cls(
            t_core=c.temp_core_neutral,
            t_skin=c.temp_skin_neutral,
            m_bl=c.skin_blood_flow_neutral,
            alfa=c.alfa_neutral,
        )


@dataclass
class SimulationResult:
    state: PhysiologicalState
    q_sensible: float
    e_skin: float
    e_rsw: float
    e_diff: float
    e_max: float
    q_res: float
    c_res: float
    h_r: float
    h_c: float
    w_max: float

    @property
    def q_skin(self) -> float:
        # 皮膚からの全熱損失 W/m2
        return self.q_sensible + self.e_skin


__all__ = [
    "UnitsEnum", "BodyPositionEnum", "StandardEnum",
    "DEFAULT_BODY_SURFACE_AREA", "DEFAULT_BODY_SURFACE_AREA_IP",
    "DEFAULT_P_ATM", "DEFAULT_P_ATM_IP", "DEFAULT_BODY_POSITION",
    "SetOptions", "EnvironmentalInput", "TwoNodeConstants",
    "PhysiologicalState", "SimulationResult",
]
