import math

import pandas as pd
import pytest

from comfortnx.tools.comfort_csv import REQUIRED_COLUMNS, compute_indices, main


def test_compute_indices_adds_columns(office_conditions):
    out = compute_indices(office_conditions)
    for col in ("set", "pmv", "ppd"):
        assert col in out.columns
    # 元の DataFrame は変更しない
    assert "set" not in office_conditions.columns

    assert out.loc[0, "set"] == pytest.approx(24.3, abs=0.05)
    assert math.isnan(out.loc[1, "set"]) and math.isnan(out.loc[1, "pmv"])
    # ASHRAE: 気流のある行は冷却効果を考慮した PMV
    assert not math.isnan(out.loc[2, "pmv"])


def test_compute_indices_optional_columns(office_conditions):
    df = office_conditions.assign(body_position=["sitting", "standing", "sitting"], wme=0.0)
    out = compute_indices(df, limit_inputs=False)
    assert out["set"].notna().all()


def test_compute_indices_missing_columns_raise(office_conditions):
    with pytest.raises(ValueError) as ei:
        compute_indices(office_conditions.drop(columns=["rh", "clo"]))
    assert "rh" in str(ei.value) and "clo" in str(ei.value)


def test_main_writes_output_csv(tmp_path, office_csv, capsys):
    out_path = tmp_path / "out" / "result.csv"
    assert main(["--input", str(office_csv), "--output", str(out_path)]) == 0
    assert out_path.exists()

    df = pd.read_csv(out_path)
    assert list(df.columns[: len(REQUIRED_COLUMNS)]) == REQUIRED_COLUMNS
    assert df["set"].isna().tolist() == [False, True, False]
    assert "rows=3" in capsys.readouterr().out


def test_main_missing_input_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        main(["--input", str(tmp_path / "missing.csv"), "--output", str(tmp_path / "o.csv")])
