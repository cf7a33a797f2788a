from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

import pandas as pd

from comfortnx.logger import get_logger
from comfortnx.models.pmv import pmv_ppd_array
from comfortnx.models.set_tmp import set_tmp_array

logger = get_logger(__name__)

REQUIRED_COLUMNS = ["tdb", "tr", "v", "rh", "met", "clo"]


def _check_columns(df: pd.DataFrame) -> None:
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"入力CSVに必要な列がありません: {', '.join(missing)}")


def compute_indices(df: pd.DataFrame, units: str = "SI", limit_inputs: bool = True) -> pd.DataFrame:
    """
    DataFrame の各行について SET と PMV/PPD（ASHRAE）を計算し、列を追加したコピーを返す。
    必須列: tdb, tr, v, rh, met, clo（任意: wme, body_position）
    """
    _check_columns(df)
    out = df.copy()
    wme = out["wme"] if "wme" in out.columns else 0.0
    position = out["body_position"] if "body_position" in out.columns else "standing"

    out["set"] = set_tmp_array(
        out["tdb"], out["tr"], out["v"], out["rh"], out["met"], out["clo"],
        wme=wme, body_position=position, units=units, limit_inputs=limit_inputs,
    )
    res = pmv_ppd_array(
        out["tdb"], out["tr"], out["v"], out["rh"], out["met"], out["clo"],
        wme=wme, standard="ASHRAE", units=units, limit_inputs=limit_inputs,
    )
    out["pmv"] = res["pmv"]
    out["ppd"] = res["ppd"]
    return out


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="温熱環境のCSVから SET・PMV・PPD を計算してCSVへ出力します")
    parser.add_argument("--input", required=True, help="入力CSV（列: tdb,tr,v,rh,met,clo[,wme,body_position]）")
    parser.add_argument("--output", required=True, help="出力CSV")
    parser.add_argument("--units", default="SI", choices=["SI", "IP", "si", "ip"], help="入力の単位系")
    parser.add_argument("--no-limit", action="store_true", help="規格の適用範囲外でも値を出力する")
    args = parser.parse_args(argv)

    in_path = Path(args.input)
    if not in_path.exists():
        raise FileNotFoundError(f"入力CSVが見つかりません: {in_path}")

    df = pd.read_csv(in_path)
    out = compute_indices(df, units=args.units, limit_inputs=not args.no_limit)

    out_path = Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out.to_csv(out_path, index=False)

    n_nan = int(out["set"].isna().sum())
    logger.info("%s → %s (%d 行, SET が NaN の行 %d)", in_path.name, out_path.name, len(out), n_nan)
    print(f"OK: {in_path.name} -> {out_path.name} (rows={len(out)}, set_nan={n_nan})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
