from .set_tmp import set_tmp, set_tmp_array
from .cooling_effect import cooling_effect, cooling_effect_array
from .pmv import pmv_ppd, pmv_ppd_array, pmv, pmv_array, ppd_from_pmv
from .utci import utci, utci_array
from .wc import wc, wc_array

__all__ = [
    # SET
    "set_tmp", "set_tmp_array",
    # 冷却効果
    "cooling_effect", "cooling_effect_array",
    # PMV / PPD
    "pmv_ppd", "pmv_ppd_array", "pmv", "pmv_array", "ppd_from_pmv",
    # UTCI
    "utci", "utci_array",
    # 風冷指数
    "wc", "wc_array",
]
