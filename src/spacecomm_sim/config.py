"""Configuration records for a link simulation run."""

from pydantic import BaseModel, Field, field_validator

from spacecomm_sim.simulator.signal import SignalParams


class ChannelState(BaseModel):
  """Channel arguments, validated before they reach the transforms.

  Attributes:
    distance_km: One-way link distance in km.
    velocity_km_s: Radial velocity in km/s (positive = receding).
    noise_std: Standard deviation of the additive noise.
    filter_window: Moving-average window size, an odd number of samples.
  """

  distance_km: float = Field(384_400.0, description="Link distance in km.", ge=0.0)
  velocity_km_s: float = Field(1000.0, description="Radial velocity in km/s.")
  noise_std: float = Field(0.3, description="Noise standard deviation.", ge=0.0)
  filter_window: int = Field(11, description="Filter window in samples.", ge=1)

  model_config = {"frozen": True}

  @field_validator("filter_window")
  @classmethod
  def _odd_window(cls, value: int) -> int:
    if value % 2 == 0:
      msg = f"filter_window must be odd, got {value}"
      raise ValueError(msg)
    return value


class SimulationConfig(BaseModel):
  """Configuration for one simulation run.

  Attributes:
    signal: Transmitted waveform.
    channel: Channel arguments.
    seed: Noise seed; None draws fresh entropy each run.
    max_points: Point budget for chart series.
  """

  signal: SignalParams = Field(
    default_factory=lambda: SignalParams(frequency=5.0),
    description="Transmitted waveform.",
  )
  channel: ChannelState = Field(default_factory=ChannelState)
  seed: int | None = Field(None, description="Noise seed.")
  max_points: int = Field(500, description="Chart point budget.", gt=0)

  model_config = {"frozen": True}
