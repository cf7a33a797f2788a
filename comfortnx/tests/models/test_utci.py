import math

import numpy as np
import pandas as pd
import pytest

import comfortnx as cn
from comfortnx.models.utci import stress_category


def test_utci_reference_value():
    assert cn.utci(25, 25, 1.0, 50) == pytest.approx(24.6, abs=0.1)


def test_utci_ip_units():
    assert cn.utci(77, 77, 3.28, 50, units="IP") == pytest.approx(76.4, abs=0.15)


def test_utci_stress_category():
    out = cn.utci(25, 25, 1.0, 50, return_stress_category=True)
    assert out["stress_category"] == "no thermal stress"
    assert stress_category(-45.0) == "extreme cold stress"
    assert stress_category(30.0) == "moderate heat stress"
    assert stress_category(50.0) == "extreme heat stress"
    assert stress_category(float("nan")) is None


def test_utci_limits():
    # 風速 0.5 m/s 未満は回帰式の適用範囲外
    assert math.isnan(cn.utci(25, 25, 0.4, 50))
    assert not math.isnan(cn.utci(25, 25, 0.4, 50, limit_inputs=False))
    assert math.isnan(cn.utci(55, 55, 1.0, 50))


def test_utci_increases_with_radiant_temperature():
    out = cn.utci_array(30, [30, 40, 50], 1.0, 50)
    assert np.all(np.diff(out) > 0)


def test_utci_array_series():
    idx = pd.RangeIndex(3)
    tdb = pd.Series([10.0, 25.0, 35.0], index=idx)
    out = cn.utci_array(tdb, tdb, 2.0, 50, return_stress_category=True)
    assert isinstance(out["utci"], pd.Series)
    assert out["utci"].name == "utci"
    assert list(out["stress_category"].index) == list(idx)
    assert out["utci"].is_monotonic_increasing
