"""Reference links for common space communication distances.

Each preset records a one-way distance and a radial velocity. `impairments()`
turns a preset into the full impairment chain used by `ChannelSimulator`.

Typical Usage:
  ```python
  from spacecomm_sim.simulator import links
  from spacecomm_sim.simulator.impairments import ChannelSimulator

  channel = ChannelSimulator(links.impairments(links.MOON, noise_std=0.3))
  result = channel.simulate(params)
  ```

Distances are representative values; planetary ranges vary with orbital
geometry.
"""

from pydantic import BaseModel, Field

from spacecomm_sim.simulator.impairments import (
  DEFAULT_REF_DISTANCE_KM,
  ChannelImpairment,
  DopplerShift,
  GaussianNoise,
  MovingAverage,
  PathLoss,
  PropagationDelay,
)


class LinkPreset(BaseModel):
  """A named link geometry.

  Attributes:
    name: Human-readable preset name.
    description: Short description of the link.
    distance_km: One-way distance in km.
    velocity_km_s: Radial velocity in km/s (positive = receding).
  """

  name: str
  description: str
  distance_km: float = Field(gt=0.0)
  velocity_km_s: float = 0.0

  model_config = {"frozen": True}


ISS = LinkPreset(
  name="ISS",
  description="Low Earth orbit, International Space Station altitude",
  distance_km=408.0,
  velocity_km_s=7.66,
)

MOON = LinkPreset(
  name="Moon",
  description="Earth-Moon mean distance",
  distance_km=384_400.0,
  velocity_km_s=1.0,
)

MARS_MIN = LinkPreset(
  name="Mars (min)",
  description="Mars at closest approach",
  distance_km=54_600_000.0,
  velocity_km_s=-20.0,
)

MARS_MAX = LinkPreset(
  name="Mars (max)",
  description="Mars at superior conjunction",
  distance_km=401_000_000.0,
  velocity_km_s=20.0,
)

JUPITER = LinkPreset(
  name="Jupiter",
  description="Jupiter at mean opposition range",
  distance_km=588_000_000.0,
  velocity_km_s=13.0,
)

PRESETS: dict[str, LinkPreset] = {
  "iss": ISS,
  "moon": MOON,
  "mars_min": MARS_MIN,
  "mars_max": MARS_MAX,
  "jupiter": JUPITER,
}


def get(key: str) -> LinkPreset:
  """Look up a preset by key (e.g. "moon", "mars_min").

  Raises:
    KeyError: If `key` is not a known preset.
  """
  try:
    return PRESETS[key]
  except KeyError:
    msg = f"Unknown link preset {key!r}, available: {', '.join(PRESETS)}"
    raise KeyError(msg) from None


def impairments(
  preset: LinkPreset,
  noise_std: float = 0.0,
  filter_window: int = 1,
  seed: int | None = None,
  ref_distance_km: float = DEFAULT_REF_DISTANCE_KM,
) -> list[ChannelImpairment]:
  """Full impairment chain for a preset link.

  Args:
    preset: Link geometry.
    noise_std: Receiver noise standard deviation.
    filter_window: Receiver moving-average window (1 disables filtering).
    seed: Noise seed for reproducible runs.
    ref_distance_km: Distance at which path loss is 0 dB.

  Returns:
    Impairments in canonical stage order.
  """
  return [
    DopplerShift(velocity_km_s=preset.velocity_km_s),
    PropagationDelay(distance_km=preset.distance_km),
    PathLoss(distance_km=preset.distance_km, ref_distance_km=ref_distance_km),
    GaussianNoise(std_dev=noise_std, seed=seed),
    MovingAverage(window_size=filter_window),
  ]
