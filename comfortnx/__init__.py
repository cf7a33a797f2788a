from .models import (
    set_tmp, set_tmp_array,
    cooling_effect, cooling_effect_array,
    pmv_ppd, pmv_ppd_array, pmv, pmv_array, ppd_from_pmv,
    utci, utci_array,
    wc, wc_array,
)

from .utils import (
    units_converter, valid_range, round_value,
    body_surface_area, v_relative, clo_dynamic,
)

from .config_types import SetOptions, TwoNodeConstants
from .errors import ComfortNxError, ConvergenceError, UsageError, ArrayLengthError, OptionError

__all__ = [
    # models
    "set_tmp", "set_tmp_array",
    "cooling_effect", "cooling_effect_array",
    "pmv_ppd", "pmv_ppd_array", "pmv", "pmv_array", "ppd_from_pmv",
    "utci", "utci_array",
    "wc", "wc_array",
    # utils
    "units_converter", "valid_range", "round_value",
    "body_surface_area", "v_relative", "clo_dynamic",
    # config
    "SetOptions", "TwoNodeConstants",
    # errors
    "ComfortNxError", "ConvergenceError", "UsageError", "ArrayLengthError", "OptionError",
]
