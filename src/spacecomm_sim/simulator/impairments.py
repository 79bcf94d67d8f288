"""Channel transforms for a point-to-point space link.

Every transform is available as a pure function over `SampledSignal` values:

- `delay`: propagation delay at the speed of light
- `doppler_signal`: relativistic Doppler shift of the carrier frequency
- `attenuate`: inverse-square path loss relative to a reference distance
- `add_noise`: additive Gaussian noise (Box-Muller)
- `smooth`: centered moving-average low-pass filter

The same effects are wrapped as `ChannelImpairment` objects so a
`ChannelSimulator` can compose them in a physically sensible order:

1. EMISSION: Doppler shift of the received carrier
2. PROPAGATION: delay (re-evaluates the analytic waveform)
3. PATH_LOSS: attenuation
4. NOISE: additive noise
5. RECEIVER: smoothing filter

The two analytic stages re-evaluate the waveform formula, so they must run
before any stage that alters sample values.
"""

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import IntEnum

import numpy as np
import numpy.typing as npt
from pydantic import BaseModel, Field

from spacecomm_sim.simulator.metrics import compute_snr, estimate_ber
from spacecomm_sim.simulator.signal import SampledSignal, SignalParams
from spacecomm_sim.simulator.waveform import evaluate_at, generate

logger = logging.getLogger(__name__)

SPEED_OF_LIGHT_KM_S = 299792.458
DEFAULT_REF_DISTANCE_KM = 1000.0

RandomSource = np.random.Generator | int | None


# ============================================================================
# Delay
# ============================================================================


def compute_delay(distance_km: float) -> float:
  """One-way light travel time in seconds over `distance_km`."""
  return distance_km / SPEED_OF_LIGHT_KM_S


def delay(
  signal: SampledSignal, distance_km: float, params: SignalParams
) -> SampledSignal:
  """Delay a signal by the light travel time over `distance_km`.

  The waveform described by `params` is re-evaluated at t - delay for every
  instant of `signal`, so any fractional-sample delay is exact. Instants
  before the signal arrives are zero.

  Args:
    signal: Signal whose time axis is kept.
    distance_km: Path length in km.
    params: Waveform to re-evaluate.

  Returns:
    Delayed signal on the same time axis.
  """
  delay_sec = compute_delay(distance_km)
  shifted = signal.time - delay_sec
  arrived = shifted >= 0
  values = np.where(
    arrived, evaluate_at(params, np.where(arrived, shifted, 0.0)), 0.0
  )
  logger.debug(f"Delay {delay_sec:.6g}s for {distance_km} km")
  return signal.with_values(values)


# ============================================================================
# Doppler
# ============================================================================


def compute_doppler_frequency(frequency_hz: float, velocity_km_s: float) -> float:
  """Relativistic Doppler shift for a source moving along the line of sight.

  Positive velocity means receding (frequency decreases), negative means
  approaching. Non-physical speeds (|v| >= c) leave the frequency unchanged.

  Args:
    frequency_hz: Emitted frequency in Hz.
    velocity_km_s: Radial velocity in km/s.

  Returns:
    Observed frequency in Hz.
  """
  beta = velocity_km_s / SPEED_OF_LIGHT_KM_S
  if abs(beta) >= 1:
    logger.warning(
      f"Velocity {velocity_km_s} km/s is not below c, Doppler shift skipped"
    )
    return frequency_hz
  return frequency_hz * math.sqrt((1 - beta) / (1 + beta))


def doppler_params(params: SignalParams, velocity_km_s: float) -> SignalParams:
  """Copy of `params` with the frequency replaced by its Doppler-shifted value."""
  shifted = compute_doppler_frequency(params.frequency, velocity_km_s)
  return params.model_copy(update={"frequency": shifted})


def doppler_signal(params: SignalParams, velocity_km_s: float) -> SampledSignal:
  """Generate the signal a receiver observes from a moving source."""
  return generate(doppler_params(params, velocity_km_s))


# ============================================================================
# Attenuation
# ============================================================================


def attenuate(
  signal: SampledSignal,
  distance_km: float,
  ref_distance_km: float = DEFAULT_REF_DISTANCE_KM,
) -> SampledSignal:
  """Scale a signal by the inverse-square law.

  The factor min(1, (ref / distance)^2) never amplifies. A non-positive
  distance returns the input unchanged.
  """
  if distance_km <= 0:
    return signal
  factor = min(1.0, (ref_distance_km / distance_km) ** 2)
  return signal.with_values(signal.values * factor)


def attenuation_db(
  distance_km: float, ref_distance_km: float = DEFAULT_REF_DISTANCE_KM
) -> float:
  """Path loss in dB relative to `ref_distance_km` (0 for non-positive distance)."""
  if distance_km <= 0:
    return 0.0
  return 20 * math.log10(ref_distance_km / distance_km)


# ============================================================================
# Noise
# ============================================================================


def gaussian_deviates(n: int, rng: RandomSource = None) -> npt.NDArray[np.float64]:
  """Draw `n` standard normal deviates with the Box-Muller transform.

  Each deviate consumes a pair of uniform draws in (0, 1].
  """
  generator = np.random.default_rng(rng)
  # random() is in [0, 1), flip it so log() never sees 0
  u = 1.0 - generator.random((n, 2))
  return np.sqrt(-2.0 * np.log(u[:, 0])) * np.cos(2 * np.pi * u[:, 1])


def add_noise(
  signal: SampledSignal, std_dev: float, rng: RandomSource = None
) -> SampledSignal:
  """Add zero-mean Gaussian noise to every sample.

  Args:
    signal: Input signal.
    std_dev: Noise standard deviation.
    rng: Seed or numpy Generator. None draws fresh entropy.

  Returns:
    Noisy signal on the same time axis.

  Raises:
    ValueError: If `std_dev` is negative.
  """
  if std_dev < 0:
    msg = f"Noise standard deviation must be >= 0, got {std_dev}"
    raise ValueError(msg)
  noise = std_dev * gaussian_deviates(len(signal), rng)
  return signal.with_values(signal.values + noise)


# ============================================================================
# Smoothing
# ============================================================================


def smooth(signal: SampledSignal, window_size: int) -> SampledSignal:
  """Centered moving average that shrinks its window near the edges.

  Sample i is the mean over [max(0, i - half), min(n - 1, i + half)] with
  half = window_size // 2. A window of 1 or less is the identity.
  """
  n = len(signal)
  if window_size <= 1 or n == 0:
    return signal

  half = window_size // 2
  idx = np.arange(n)
  lo = np.maximum(0, idx - half)
  hi = np.minimum(n - 1, idx + half)

  csum = np.concatenate(([0.0], np.cumsum(signal.values)))
  sums = csum[hi + 1] - csum[lo]
  return signal.with_values(sums / (hi - lo + 1))


# ============================================================================
# Composable impairments
# ============================================================================


class ImpairmentStage(IntEnum):
  """Canonical order of channel impairments.

  1. EMISSION: effects on the waveform itself (Doppler)
  2. PROPAGATION: travel time (delay)
  3. PATH_LOSS: distance attenuation
  4. NOISE: additive noise
  5. RECEIVER: receiver-side filtering
  """

  EMISSION = 1
  PROPAGATION = 2
  PATH_LOSS = 3
  NOISE = 4
  RECEIVER = 5


class ChannelImpairment(ABC):
  """Abstract base class for link impairments."""

  @abstractmethod
  def apply(self, signal: SampledSignal, params: SignalParams) -> SampledSignal:
    """Apply this impairment to the signal.

    Args:
      signal: Signal entering this stage.
      params: Effective waveform parameters at this stage.

    Returns:
      Impaired signal on the same time axis.
    """

  def shift_params(self, params: SignalParams) -> SignalParams:
    """Waveform parameters seen by this and all later stages."""
    return params

  @property
  @abstractmethod
  def stage(self) -> ImpairmentStage:
    """The stage at which this impairment is applied."""

  @property
  @abstractmethod
  def name(self) -> str:
    """Human-readable name for this impairment."""


class DopplerShift(BaseModel, ChannelImpairment):
  """Relativistic Doppler shift from the radial velocity of the source."""

  velocity_km_s: float

  model_config = {"frozen": True}

  def shift_params(self, params: SignalParams) -> SignalParams:
    return doppler_params(params, self.velocity_km_s)

  def apply(self, signal: SampledSignal, params: SignalParams) -> SampledSignal:
    """Re-evaluate the (already shifted) waveform on the signal's time axis."""
    return signal.with_values(evaluate_at(params, signal.time))

  @property
  def stage(self) -> ImpairmentStage:
    return ImpairmentStage.EMISSION

  @property
  def name(self) -> str:
    return f"Doppler({self.velocity_km_s}km/s)"


class PropagationDelay(BaseModel, ChannelImpairment):
  """Light travel time over the link distance."""

  distance_km: float = Field(ge=0.0)

  model_config = {"frozen": True}

  def apply(self, signal: SampledSignal, params: SignalParams) -> SampledSignal:
    return delay(signal, self.distance_km, params)

  @property
  def stage(self) -> ImpairmentStage:
    return ImpairmentStage.PROPAGATION

  @property
  def name(self) -> str:
    return f"Delay({self.distance_km}km)"


class PathLoss(BaseModel, ChannelImpairment):
  """Inverse-square attenuation relative to a reference distance."""

  distance_km: float = Field(ge=0.0)
  ref_distance_km: float = Field(default=DEFAULT_REF_DISTANCE_KM, gt=0.0)

  model_config = {"frozen": True}

  def apply(self, signal: SampledSignal, params: SignalParams) -> SampledSignal:
    return attenuate(signal, self.distance_km, self.ref_distance_km)

  @property
  def stage(self) -> ImpairmentStage:
    return ImpairmentStage.PATH_LOSS

  @property
  def name(self) -> str:
    return f"PathLoss({attenuation_db(self.distance_km, self.ref_distance_km):.1f}dB)"


class GaussianNoise(BaseModel, ChannelImpairment):
  """Additive Gaussian noise with a fixed standard deviation.

  A fresh generator is seeded on every call, so a seeded impairment yields
  the same noise each time it is applied.
  """

  std_dev: float = Field(ge=0.0)
  seed: int | None = None

  model_config = {"frozen": True}

  def apply(self, signal: SampledSignal, params: SignalParams) -> SampledSignal:
    return add_noise(signal, self.std_dev, np.random.default_rng(self.seed))

  @property
  def stage(self) -> ImpairmentStage:
    return ImpairmentStage.NOISE

  @property
  def name(self) -> str:
    return f"Noise(sigma={self.std_dev})"


class MovingAverage(BaseModel, ChannelImpairment):
  """Receiver low-pass filter (centered moving average)."""

  window_size: int = Field(default=1, ge=1)

  model_config = {"frozen": True}

  def apply(self, signal: SampledSignal, params: SignalParams) -> SampledSignal:
    return smooth(signal, self.window_size)

  @property
  def stage(self) -> ImpairmentStage:
    return ImpairmentStage.RECEIVER

  @property
  def name(self) -> str:
    return f"MovingAverage({self.window_size})"


class LinkResult(BaseModel):
  """Outcome of one simulated transmission.

  Link quality is measured on the arrival-aligned chain, i.e. every
  impairment except propagation delay, so a delay longer than the signal
  still yields meaningful SNR and BER figures.

  Attributes:
    params: Transmitted waveform parameters.
    received_params: Waveform parameters after emission effects (Doppler).
    transmitted: Signal as generated.
    reference: Noiseless arrival-aligned signal, taken just before the noise
      stage.
    noisy: Arrival-aligned signal right after the noise stage.
    filtered: Arrival-aligned signal after receiver filtering.
    received: Signal after every impairment, delay included.
  """

  params: SignalParams
  received_params: SignalParams
  transmitted: SampledSignal
  reference: SampledSignal
  noisy: SampledSignal
  filtered: SampledSignal
  received: SampledSignal

  model_config = {"frozen": True}

  @property
  def noisy_snr_db(self) -> float:
    """SNR before receiver filtering."""
    return compute_snr(self.reference, self.noisy)

  @property
  def snr_db(self) -> float:
    """SNR of the filtered signal against the noiseless reference."""
    return compute_snr(self.reference, self.filtered)

  @property
  def ber(self) -> float:
    """BPSK bit error rate estimate at `snr_db`."""
    return estimate_ber(self.snr_db)


class ChannelSimulator:
  """Applies link impairments in canonical stage order.

  Impairments are sorted by stage regardless of input order.
  """

  def __init__(self, impairments: Sequence[ChannelImpairment]) -> None:
    """Initialize channel simulator with impairments.

    Args:
      impairments: Impairment objects to apply.
    """
    original_names = [imp.name for imp in impairments]
    self.impairments = sorted(impairments, key=lambda x: x.stage)
    sorted_names = [imp.name for imp in self.impairments]

    if original_names != sorted_names:
      logger.warning(
        f"Impairments reordered to canonical sequence:\n"
        f"  User order: {original_names}\n"
        f"  Canonical:  {sorted_names}"
      )

  def apply(self, signal: SampledSignal, params: SignalParams) -> SampledSignal:
    """Apply all impairments to a signal generated from `params`.

    Args:
      signal: Transmitted signal.
      params: Waveform parameters `signal` was generated from.

    Returns:
      Impaired signal with the same time axis as the input.
    """
    return self._run(signal, params).received

  def simulate(self, params: SignalParams) -> LinkResult:
    """Generate a signal from `params` and pass it through the channel."""
    return self._run(generate(params), params)

  def _run(self, signal: SampledSignal, params: SignalParams) -> LinkResult:
    transmitted = signal
    effective = params
    # Same chain without delay: the signal as seen once it has arrived
    aligned = reference = noisy = signal
    for impairment in self.impairments:
      effective = impairment.shift_params(effective)
      signal = impairment.apply(signal, effective)
      if impairment.stage != ImpairmentStage.PROPAGATION:
        aligned = impairment.apply(aligned, effective)
      if impairment.stage < ImpairmentStage.NOISE:
        reference = aligned
      if impairment.stage <= ImpairmentStage.NOISE:
        noisy = aligned
      logger.debug(f"Applied {impairment.name}")

    return LinkResult(
      params=params,
      received_params=effective,
      transmitted=transmitted,
      reference=reference,
      noisy=noisy,
      filtered=aligned,
      received=signal,
    )

  @property
  def name(self) -> str:
    """Human-readable description of the channel."""
    return "_".join(imp.name for imp in self.impairments)

  @property
  def distance_km(self) -> float | None:
    """Link distance if a delay impairment is present."""
    for imp in self.impairments:
      if isinstance(imp, PropagationDelay):
        return imp.distance_km
    return None

  @property
  def velocity_km_s(self) -> float | None:
    """Radial velocity if a Doppler impairment is present."""
    for imp in self.impairments:
      if isinstance(imp, DopplerShift):
        return imp.velocity_km_s
    return None
