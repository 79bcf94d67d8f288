"""Value types shared by the generator, the channel transforms and the metrics.

A `SampledSignal` is an immutable pair of equal-length float64 arrays. Both
arrays are flagged read-only on construction so a transform can only ever
produce a derived copy, never edit its input in place.
"""

import math
from enum import StrEnum

import numpy as np
import numpy.typing as npt
from pydantic import BaseModel, Field, field_validator, model_validator


class WaveformKind(StrEnum):
  """Closed set of baseband waveform shapes."""

  SINE = "sine"
  SQUARE = "square"
  SAWTOOTH = "sawtooth"
  PULSE = "pulse"


class SignalParams(BaseModel):
  """Generator configuration. Fully determines a generated signal.

  Attributes:
    frequency: Fundamental frequency in Hz.
    amplitude: Peak amplitude.
    duration: Signal length in seconds.
    sampling_rate: Samples per second in Hz.
    waveform_kind: Shape of the waveform.
  """

  frequency: float = Field(..., gt=0.0, description="Frequency in Hz.")
  amplitude: float = Field(1.0, gt=0.0, description="Peak amplitude.")
  duration: float = Field(1.0, gt=0.0, description="Duration in seconds.")
  sampling_rate: float = Field(1000.0, gt=0.0, description="Sample rate in Hz.")
  waveform_kind: WaveformKind = WaveformKind.SINE

  model_config = {"frozen": True}

  @property
  def num_samples(self) -> int:
    """Number of samples the generator emits: floor(duration * sampling_rate)."""
    return math.floor(self.duration * self.sampling_rate)


def _read_only(values: object) -> npt.NDArray[np.float64]:
  array = np.array(values, dtype=np.float64, copy=True)
  if array.ndim != 1:
    msg = f"Signal arrays must be one-dimensional, got shape {array.shape}"
    raise ValueError(msg)
  array.setflags(write=False)
  return array


class SampledSignal(BaseModel):
  """Uniformly sampled real signal.

  Attributes:
    time: Sample instants in seconds, strictly increasing.
    values: Amplitude at each sample instant.
  """

  time: np.ndarray
  values: np.ndarray

  model_config = {"frozen": True, "arbitrary_types_allowed": True}

  @field_validator("time", "values", mode="before")
  @classmethod
  def _as_read_only_array(cls, value: object) -> npt.NDArray[np.float64]:
    if isinstance(value, np.ndarray) and not value.flags.writeable:
      if value.dtype == np.float64 and value.ndim == 1:
        # Already immutable, share it.
        return value
    return _read_only(value)

  @model_validator(mode="after")
  def _check_lengths(self) -> "SampledSignal":
    if len(self.time) != len(self.values):
      msg = (
        f"time and values must have equal length, "
        f"got {len(self.time)} and {len(self.values)}"
      )
      raise ValueError(msg)
    if np.any(np.diff(self.time) <= 0):
      msg = "time must be strictly increasing"
      raise ValueError(msg)
    return self

  def __len__(self) -> int:
    return len(self.values)

  @classmethod
  def empty(cls) -> "SampledSignal":
    """A signal with no samples."""
    return cls(time=np.empty(0), values=np.empty(0))

  def with_values(self, values: npt.ArrayLike) -> "SampledSignal":
    """Derive a signal on the same time axis with new sample values."""
    return SampledSignal(time=self.time, values=values)

  def same_time_axis(self, other: "SampledSignal") -> bool:
    """True when both signals are sampled at exactly the same instants."""
    return np.array_equal(self.time, other.time)


class ChartPoint(BaseModel):
  """A single (time, value) point of a display series."""

  time: float
  value: float

  model_config = {"frozen": True}
