"""
Gagge の2ノードモデル（核心部・皮膚）と SET（標準新有効温度）の探索。

- normalize_inputs: 単位変換と既定値の補完（内部は常に SI）
- within_limits: ASHRAE 55 の適用範囲判定
- simulate: 1分刻み・固定回数の熱収支計算で生理状態を求める
- standard_effective_temperature: 標準環境で同じ皮膚熱損失となる温度をセカント法で探す

参考: ASHRAE 55-2020 Appendix D, Gagge A.P., Fobelets A.P., Berglund L.G. (1986)
"""
from __future__ import annotations

import math
from typing import Optional, Tuple

from ..config_types import (
    BodyPositionEnum,
    DEFAULT_BODY_SURFACE_AREA,
    DEFAULT_BODY_SURFACE_AREA_IP,
    DEFAULT_P_ATM,
    DEFAULT_P_ATM_IP,
    EnvironmentalInput,
    PhysiologicalState,
    SimulationResult,
    TwoNodeConstants,
    UnitsEnum,
)
from ..errors import ConvergenceError
from ..logger import get_logger
from ..utils.psychrometrics import p_sat_torr
from ..utils.ranges import all_valid, check_standard_compliance
from ..utils.units import units_converter

logger = get_logger(__name__)

# 標準気圧 [Pa]
P_STANDARD = 101325.0


def normalize_inputs(
    tdb: float,
    tr: float,
    v: float,
    rh: float,
    met: float,
    clo: float,
    wme: float = 0.0,
    body_surface_area: Optional[float] = None,
    p_atm: Optional[float] = None,
    body_position=None,
    units="SI",
) -> Tuple[EnvironmentalInput, UnitsEnum]:
    """
    入力を SI の EnvironmentalInput にそろえる。
    IP の場合: 温度 [°F]、風速 [fps]、体表面積 [ft2]、気圧 [atm]。
    体表面積・気圧を省略すると、それぞれの単位系の標準値を使う。
    """
    u = UnitsEnum.parse(units)
    position = BodyPositionEnum.parse(body_position)
    wme = 0.0 if wme is None else wme

    if u is UnitsEnum.IP:
        body_surface_area = DEFAULT_BODY_SURFACE_AREA_IP if body_surface_area is None else body_surface_area
        p_atm = DEFAULT_P_ATM_IP if p_atm is None else p_atm
        conv = units_converter(from_units="IP", tdb=tdb, tr=tr, v=v, area=body_surface_area, pressure=p_atm)
        tdb, tr, v = conv["tdb"], conv["tr"], conv["v"]
        body_surface_area, p_atm = conv["area"], conv["pressure"]
    else:
        body_surface_area = DEFAULT_BODY_SURFACE_AREA if body_surface_area is None else body_surface_area
        p_atm = DEFAULT_P_ATM if p_atm is None else p_atm

    env = EnvironmentalInput(
        tdb=float(tdb),
        tr=float(tr),
        v=float(v),
        rh=float(rh),
        met=float(met),
        clo=float(clo),
        wme=float(wme),
        body_surface_area=float(body_surface_area),
        p_atm=float(p_atm),
        body_position=position,
    )
    return env, u


def is_physical(env: EnvironmentalInput) -> bool:
    """モデルが計算可能な入力か（有限値・正の気圧と体表面積）。"""
    values = (env.tdb, env.tr, env.v, env.rh, env.met, env.clo, env.wme, env.body_surface_area, env.p_atm)
    if not all(math.isfinite(x) for x in values):
        return False
    return env.p_atm > 0 and env.body_surface_area > 0 and env.clo >= 0 and env.met > 0


def within_limits(env: EnvironmentalInput) -> bool:
    """ASHRAE 55 の適用範囲（tdb, tr, v, met, clo）に収まっているか。"""
    checked = check_standard_compliance(
        "ashrae", tdb=env.tdb, tr=env.tr, v=env.v, met=env.met, clo=env.clo,
    )
    return all_valid(checked)


def _convective_coefficient(air_speed: float, p_ratio: float, met: float, calculate_ce: bool) -> float:
    # 自然対流・強制対流の大きい方。冷却効果の算定時は代謝による対流を含めない
    h_c = max(3.0 * math.pow(p_ratio, 0.53), 8.600001 * math.pow(air_speed * p_ratio, 0.53))
    if not calculate_ce and met > 0.85:
        h_c = max(h_c, 5.66 * math.pow(met - 0.85, 0.39))
    return h_c


def _clothing_surface(
    t_skin: float,
    env: EnvironmentalInput,
    h_c: float,
    h_r: float,
    r_clo: float,
    f_a_cl: float,
    radiant_ratio: float,
    c: TwoNodeConstants,
) -> Tuple[float, float, float, float]:
    """
    着衣表面温度を不動点反復で求める。
    戻り値: (t_cl, h_r, r_a, t_op)
    """
    h_t = h_r + h_c
    r_a = 1.0 / (f_a_cl * h_t)
    t_op = (h_r * env.tr + h_c * env.tdb) / h_t
    t_cl = (r_a * t_skin + r_clo * t_op) / (r_a + r_clo)

    for _ in range(c.t_cl_max_iter):
        h_r = 4.0 * 0.95 * c.sbc * ((t_cl + env.tr) / 2.0 + 273.15) ** 3.0 * radiant_ratio
        h_t = h_r + h_c
        r_a = 1.0 / (f_a_cl * h_t)
        t_op = (h_r * env.tr + h_c * env.tdb) / h_t
        t_cl_new = (r_a * t_skin + r_clo * t_op) / (r_a + r_clo)
        converged = abs(t_cl_new - t_cl) <= c.t_cl_tolerance
        t_cl = t_cl_new
        if converged:
            return t_cl, h_r, r_a, t_op

    raise ConvergenceError(
        f"着衣表面温度が {c.t_cl_max_iter} 回の反復で収束しませんでした (tdb={env.tdb}, tr={env.tr})"
    )


def simulate(
    env: EnvironmentalInput,
    calculate_ce: bool = False,
    constants: Optional[TwoNodeConstants] = None,
) -> SimulationResult:
    """
    2ノードモデルを固定回数（既定60分）だけ進め、最終状態と熱損失を返す。
    状態は毎回中立値から始め、呼び出し間で共有しない。
    """
    c = constants or TwoNodeConstants()
    state = PhysiologicalState.neutral(c)

    air_speed = max(env.v, 0.1)
    p_ratio = env.p_atm / P_STANDARD
    vapor_pressure = env.rh * p_sat_torr(env.tdb) / 100.0  # mmHg
    radiant_ratio = c.radiant_area_ratio[env.body_position.value]

    temp_body_neutral = c.alfa_neutral * c.temp_skin_neutral + (1 - c.alfa_neutral) * c.temp_core_neutral

    r_clo = 0.155 * env.clo          # 着衣の熱抵抗 m2K/W
    f_a_cl = 1.0 + 0.15 * env.clo    # 着衣による表面積増加
    lr = 2.2 / p_ratio               # Lewis 比
    rm = (env.met - env.wme) * c.met_factor
    m = env.met * c.met_factor
    wme = env.wme * c.met_factor

    if env.clo > 0:
        i_cl = 0.45
        w_max = 0.59 * math.pow(air_speed, -0.08)
    else:
        i_cl = 1.0
        w_max = 0.38 * math.pow(air_speed, -0.29)

    h_c = _convective_coefficient(air_speed, p_ratio, env.met, calculate_ce)
    h_r = 4.7

    # 呼吸による潜熱・顕熱損失
    q_res = 0.0023 * m * (44.0 - vapor_pressure)
    c_res = 0.0014 * m * (34.0 - env.tdb)

    e_skin = 0.1 * env.met
    q_sensible = 0.0
    e_rsw = 0.0
    e_diff = 0.0
    e_max = 0.0

    tc_sk_factor = 0.97 * c.body_weight
    for _ in range(c.length_time_simulation):
        _, h_r, r_a, t_op = _clothing_surface(
            state.t_skin, env, h_c, h_r, r_clo, f_a_cl, radiant_ratio, c,
        )

        q_sensible = (state.t_skin - t_op) / (r_a + r_clo)
        # 核心部→皮膚の熱輸送（組織の熱コンダクタンス 5.28 + 血液 1.163 Wh/(L K)）
        hf_cs = (state.t_core - state.t_skin) * (5.28 + 1.163 * state.m_bl)
        s_core = m - hf_cs - q_res - c_res - wme
        s_skin = hf_cs - q_sensible - e_skin
        tc_sk = tc_sk_factor * state.alfa
        tc_cr = tc_sk_factor * (1 - state.alfa)
        state.t_skin += s_skin * env.body_surface_area / (tc_sk * 60.0)
        state.t_core += s_core * env.body_surface_area / (tc_cr * 60.0)
        t_body = state.alfa * state.t_skin + (1 - state.alfa) * state.t_core

        # 体温調節の信号
        sk_sig = state.t_skin - c.temp_skin_neutral
        warm_sk = max(sk_sig, 0.0)
        cold_sk = max(-sk_sig, 0.0)
        cr_sig = state.t_core - c.temp_core_neutral
        warm_cr = max(cr_sig, 0.0)
        cold_cr = max(-cr_sig, 0.0)
        warm_b = max(t_body - temp_body_neutral, 0.0)

        m_bl = (c.skin_blood_flow_neutral + c.c_dil * warm_cr) / (1 + c.c_str * cold_sk)
        state.m_bl = min(max(m_bl, c.min_skin_blood_flow), c.max_skin_blood_flow)

        m_rsw = min(c.c_sw * warm_b * math.exp(warm_sk / 10.7), c.max_sweating)
        e_rsw = 0.68 * m_rsw

        r_ea = 1.0 / (lr * f_a_cl * h_c)
        r_ecl = r_clo / (lr * i_cl)
        e_max = (p_sat_torr(state.t_skin) - vapor_pressure) / (r_ea + r_ecl)

        if e_max > 0:
            p_rsw = e_rsw / e_max
            w = 0.06 + 0.94 * p_rsw
            e_diff = w * e_max - e_rsw
            if w > w_max:
                w = w_max
                p_rsw = w_max / 0.94
                e_rsw = p_rsw * e_max
                e_diff = 0.06 * (1.0 - p_rsw) * e_max
        else:
            # 皮膚側の蒸気圧が周囲以下 → 蒸発なし
            e_diff = 0.0
            e_rsw = 0.0
            w = w_max

        state.w = w
        e_skin = e_rsw + e_diff
        state.m_rsw = e_rsw / 0.68

        # ふるえ産熱
        m = rm + 19.4 * cold_sk * cold_cr
        state.alfa = 0.0417737 + 0.7451833 / (state.m_bl + 0.585417)

    return SimulationResult(
        state=state,
        q_sensible=q_sensible,
        e_skin=e_skin,
        e_rsw=e_rsw,
        e_diff=e_diff,
        e_max=e_max,
        q_res=q_res,
        c_res=c_res,
        h_r=h_r,
        h_c=h_c,
        w_max=w_max,
    )


def standard_effective_temperature(
    env: EnvironmentalInput,
    result: SimulationResult,
    calculate_ce: bool = False,
    constants: Optional[TwoNodeConstants] = None,
) -> float:
    """
    標準環境（相対湿度50%, 静穏気流, 代謝量に応じた標準着衣）で、
    実環境と同じ皮膚温・ぬれ率・皮膚熱損失となる温度（SET）を求める。
    上限回数で収束しない場合は警告を出し、最良推定値を返す。
    """
    c = constants or TwoNodeConstants()
    p_ratio = env.p_atm / P_STANDARD
    lr = 2.2 / p_ratio

    t_skin = result.state.t_skin
    w = result.state.w
    q_skin = result.q_skin
    p_s_sk = p_sat_torr(t_skin)

    # 標準環境（末尾 _s）
    h_r_s = result.h_r
    h_c_s = 3.0 * math.pow(p_ratio, 0.53)
    if not calculate_ce and env.met > 0.85:
        h_c_s = max(h_c_s, 5.66 * math.pow(env.met - 0.85, 0.39))
    h_c_s = max(h_c_s, 3.0)
    h_t_s = h_c_s + h_r_s

    clo_s = 1.52 / ((env.met - env.wme) + 0.6944) - 0.1835
    r_cl_s = 0.155 * clo_s
    f_a_cl_s = 1.0 + 0.25 * clo_s
    f_cl_s = 1.0 / (1.0 + 0.155 * f_a_cl_s * h_t_s * clo_s)
    i_m_s = 0.45
    i_cl_s = i_m_s * h_c_s / h_t_s * (1 - f_cl_s) / (h_c_s / h_t_s - f_cl_s * i_m_s)
    r_a_s = 1.0 / (f_a_cl_s * h_t_s)
    r_ea_s = 1.0 / (lr * f_a_cl_s * h_c_s)
    r_ecl_s = r_cl_s / (lr * i_cl_s)
    h_d_s = 1.0 / (r_a_s + r_cl_s)
    h_e_s = 1.0 / (r_ea_s + r_ecl_s)

    def heat_balance_error(t_set: float) -> float:
        return q_skin - h_d_s * (t_skin - t_set) - w * h_e_s * (p_s_sk - 0.5 * p_sat_torr(t_set))

    delta = 0.0001
    set_old = round(t_skin - q_skin / h_d_s, 2)
    best, best_err = set_old, abs(heat_balance_error(set_old))

    for _ in range(c.set_max_iter):
        err_1 = heat_balance_error(set_old)
        err_2 = heat_balance_error(set_old + delta)
        if err_2 == err_1:
            break
        set_new = set_old - delta * err_1 / (err_2 - err_1)
        if not math.isfinite(set_new):
            break
        dx = set_new - set_old
        set_old = set_new

        err_new = abs(heat_balance_error(set_new))
        if err_new <= best_err:
            best, best_err = set_new, err_new
        if abs(dx) <= c.set_tolerance:
            return set_new

    logger.warning(
        "SET の探索が収束しませんでした（最良推定値 %.3f を返します, 残差=%.3g, tdb=%s, tr=%s, v=%s）",
        best, best_err, env.tdb, env.tr, env.v,
    )
    return best


def set_from_environment(
    env: EnvironmentalInput,
    calculate_ce: bool = False,
    constants: Optional[TwoNodeConstants] = None,
) -> float:
    """実環境を simulate し、その結果から SET [°C] を求める。"""
    result = simulate(env, calculate_ce=calculate_ce, constants=constants)
    return standard_effective_temperature(env, result, calculate_ce=calculate_ce, constants=constants)


__all__ = [
    "P_STANDARD",
    "normalize_inputs", "is_physical", "within_limits",
    "simulate", "standard_effective_temperature", "set_from_environment",
]
