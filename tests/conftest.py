import pandas as pd
import pytest


@pytest.fixture
def office_conditions():
    """
    CSV ツール用の最小構成。
    2 行目は tdb が適用範囲外なので SET / PMV が NaN になる。
    """
    return pd.DataFrame(
        {
            "tdb": [25.0, 45.0, 28.0],
            "tr": [25.0, 45.0, 29.0],
            "v": [0.1, 0.1, 0.6],
            "rh": [50.0, 50.0, 60.0],
            "met": [1.2, 1.2, 1.2],
            "clo": [0.5, 0.5, 0.5],
        }
    )


@pytest.fixture
def office_csv(tmp_path, office_conditions):
    path = tmp_path / "conditions.csv"
    office_conditions.to_csv(path, index=False)
    return path
