import numpy as np
import pandas as pd
import pytest

import comfortnx.utils as utils
from comfortnx.errors import ArrayLengthError
from comfortnx.utils.psychrometrics import p_sat_hpa, p_sat_kpa, p_sat_torr


# body ------------------------------------------------------------------------
def test_body_surface_area_formulas():
    assert utils.body_surface_area(70, 1.8) == pytest.approx(1.882, abs=5e-3)
    for formula in ("takahira", "fujimoto", "kurazumi"):
        assert 1.6 < utils.body_surface_area(70, 1.8, formula=formula) < 2.1
    with pytest.raises(ValueError):
        utils.body_surface_area(70, 1.8, formula="mosteller")


def test_v_relative_and_clo_dynamic():
    assert utils.v_relative(0.1, 1.0) == 0.1
    assert utils.v_relative(0.1, 1.5) == pytest.approx(0.25)
    np.testing.assert_allclose(utils.v_relative([0.1, 0.1], [1.0, 2.0]), [0.1, 0.4])

    assert utils.clo_dynamic(1.0, 1.2) == 1.0
    assert utils.clo_dynamic(1.0, 2.0) == pytest.approx(0.8)
    assert utils.clo_dynamic(1.0, 1.2, standard="ISO") == pytest.approx(0.933)


# psychrometrics --------------------------------------------------------------
def test_saturation_pressures_agree():
    # 25 °C の飽和水蒸気圧はおよそ 3.17 kPa（23.8 mmHg）
    assert p_sat_kpa(25.0) == pytest.approx(3.17, abs=0.02)
    assert p_sat_torr(25.0) == pytest.approx(23.8, abs=0.2)
    assert p_sat_hpa(25.0) == pytest.approx(31.7, abs=0.2)
    np.testing.assert_allclose(p_sat_hpa([0.0, 25.0]), [6.11, 31.7], atol=0.2)


# arrays ----------------------------------------------------------------------
def test_broadcast_inputs_repeats_scalars():
    out = utils.broadcast_inputs(a=[1, 2, 3], b=0.5, c=None)
    assert out == {"a": [1, 2, 3], "b": [0.5] * 3, "c": [None] * 3}


def test_broadcast_inputs_length_mismatch():
    with pytest.raises(ArrayLengthError):
        utils.broadcast_inputs(a=[1, 2], b=np.array([1.0, 2.0, 3.0]))


def test_as_float_array_rejects_2d():
    assert utils.as_float_array(3).tolist() == [3.0]
    with pytest.raises(ArrayLengthError):
        utils.as_float_array([[1, 2], [3, 4]], "tdb")


def test_wrap_like_keeps_series_index():
    s = pd.Series([1.0, 2.0], index=["a", "b"])
    out = utils.wrap_like([3.0, 4.0], s, name="x")
    assert isinstance(out, pd.Series) and list(out.index) == ["a", "b"] and out.name == "x"
    assert isinstance(utils.wrap_like([3.0], [1.0]), np.ndarray)
