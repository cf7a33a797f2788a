import dataclasses
import logging
import math

import numpy as np
import pytest

import comfortnx as cn


# ISO 7730 Annex D の検証用データ (tdb, tr, vr, rh, met, clo, pmv, ppd)
ISO_TABLE = [
    (22.0, 22.0, 0.1, 60, 1.2, 0.5, -0.75, 17.0),
    (27.0, 27.0, 0.1, 60, 1.2, 0.5, 0.77, 17.0),
    (27.0, 27.0, 0.3, 60, 1.2, 0.5, 0.44, 9.0),
    (23.5, 25.5, 0.1, 60, 1.2, 0.5, -0.01, 5.0),
    (23.5, 25.5, 0.3, 60, 1.2, 0.5, -0.55, 11.0),
    (19.0, 19.0, 0.1, 40, 1.2, 1.0, -0.60, 13.0),
]


@pytest.mark.parametrize("tdb,tr,vr,rh,met,clo,pmv,ppd", ISO_TABLE)
def test_pmv_ppd_iso_reference_table(tdb, tr, vr, rh, met, clo, pmv, ppd):
    out = cn.pmv_ppd(tdb, tr, vr, rh, met, clo, standard="ISO")
    assert out["pmv"] == pytest.approx(pmv, abs=0.02)
    assert out["ppd"] == pytest.approx(ppd, abs=1.0)


def test_ppd_from_pmv():
    assert cn.ppd_from_pmv(0.0) == pytest.approx(5.0)
    out = cn.ppd_from_pmv([-1.0, 0.0, 1.0])
    assert isinstance(out, np.ndarray)
    assert out[0] == pytest.approx(out[2])
    assert out[0] > out[1]


def test_pmv_ppd_ashrae_equals_iso_in_still_air():
    iso = cn.pmv_ppd(27, 27, 0.1, 60, 1.2, 0.5, standard="ISO")
    ashrae = cn.pmv_ppd(27, 27, 0.1, 60, 1.2, 0.5, standard="ashrae")
    assert ashrae == iso


def test_pmv_ppd_ashrae_reference_value():
    out = cn.pmv_ppd(25, 25, 0.5, 50, 1.2, 0.5, standard="ASHRAE")
    assert out["pmv"] == pytest.approx(-0.69, abs=0.01)
    assert out["ppd"] == pytest.approx(15.1, abs=0.1)


def test_pmv_ppd_ashrae_uses_cooling_effect():
    still = cn.pmv(28, 28, 0.1, 50, 1.2, 0.5, standard="ASHRAE")
    breezy = cn.pmv(28, 28, 0.8, 50, 1.2, 0.5, standard="ASHRAE")
    assert breezy < still
    # ISO は冷却効果を使わないので結果が異なる
    assert breezy != cn.pmv(28, 28, 0.8, 50, 1.2, 0.5, standard="ISO")


def test_pmv_ppd_limits_by_standard():
    # tdb=35 は ISO の範囲外だが ASHRAE の範囲内
    assert math.isnan(cn.pmv(35, 35, 0.1, 50, 1.0, 0.3, standard="ISO"))
    assert not math.isnan(cn.pmv(35, 35, 0.1, 50, 1.0, 0.3, standard="ASHRAE"))
    assert not math.isnan(cn.pmv(35, 35, 0.1, 50, 1.0, 0.3, standard="ISO", limit_inputs=False))


def test_pmv_ppd_airspeed_control():
    # 作用温度 22 °C で 0.3 m/s は、風速を調整できない場合の上限 0.2 m/s を超える
    assert not math.isnan(cn.pmv(22, 22, 0.3, 50, 1.2, 0.8, standard="ASHRAE"))
    assert math.isnan(cn.pmv(22, 22, 0.3, 50, 1.2, 0.8, standard="ASHRAE", airspeed_control=False))


def test_pmv_ppd_ip_units():
    out = cn.pmv_ppd(80.6, 80.6, 0.328, 60, 1.2, 0.5, units="IP")
    assert out["pmv"] == pytest.approx(0.77, abs=0.02)


def test_pmv_ppd_unrounded():
    out = cn.pmv_ppd(25, 25, 0.1, 50, 1.2, 0.5, round=False)
    assert out["ppd"] == pytest.approx(cn.ppd_from_pmv(out["pmv"]))


def test_pmv_ppd_unknown_standard_raises():
    with pytest.raises(cn.OptionError):
        cn.pmv_ppd(25, 25, 0.1, 50, 1.2, 0.5, standard="EN16798")


def test_pmv_ppd_array():
    out = cn.pmv_ppd_array([22, 27, 40], 22, 0.1, 60, 1.2, 0.5)
    assert out["pmv"].shape == (3,)
    assert out["pmv"][0] < out["pmv"][1]
    # tdb=40 は ISO の範囲外
    assert math.isnan(out["pmv"][2]) and math.isnan(out["ppd"][2])
    np.testing.assert_allclose(cn.pmv_array([22, 27], 22, 0.1, 60, 1.2, 0.5), out["pmv"][:2])


def test_pmv_ppd_ashrae_without_cooling_effect_on_failure(caplog):
    # 冷却効果が計算できなければ 0 とし、実際の風速のまま PMV を計算する
    c = dataclasses.replace(cn.TwoNodeConstants(), t_cl_max_iter=0)
    with caplog.at_level(logging.WARNING, logger="comfortnx"):
        out = cn.pmv_ppd(25, 25, 0.5, 50, 1.2, 0.5, standard="ASHRAE", constants=c)
    assert out == cn.pmv_ppd(25, 25, 0.5, 50, 1.2, 0.5, standard="ISO")
    assert "冷却効果を計算できませんでした" in caplog.text


def test_pmv_ppd_calculation_failure_is_nan(caplog):
    with caplog.at_level(logging.WARNING, logger="comfortnx"):
        out = cn.pmv_ppd(25, 25, -0.1, 50, 1.2, 0.5, limit_inputs=False)
    assert math.isnan(out["pmv"]) and math.isnan(out["ppd"])
    assert "PMV を計算できませんでした" in caplog.text
