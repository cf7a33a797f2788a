# 明示的に公開する API を限定する
from .units import units_converter
from .ranges import valid_range, round_value, check_standard_compliance, all_valid
from .psychrometrics import p_sat_torr, p_sat_kpa, p_sat_hpa
from .body import body_surface_area, v_relative, clo_dynamic
from .arrays import as_float_array, ensure_sequence, broadcast_inputs, wrap_like

__all__ = [
    # units
    "units_converter",
    # ranges
    "valid_range", "round_value", "check_standard_compliance", "all_valid",
    # psychrometrics
    "p_sat_torr", "p_sat_kpa", "p_sat_hpa",
    # body
    "body_surface_area", "v_relative", "clo_dynamic",
    # arrays
    "as_float_array", "ensure_sequence", "broadcast_inputs", "wrap_like",
]
