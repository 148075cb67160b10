from scalesim.utils.ids import new_simulation_id
from scalesim.utils.numeric import clamp, clamp_pct, round_half_up

__all__ = ["clamp", "clamp_pct", "new_simulation_id", "round_half_up"]
