"""Baseband waveform generator.

Each waveform kind is an analytic function of phase (cycles, i.e.
frequency * t). The same formula table is used to build a fresh signal and to
re-evaluate a waveform at shifted instants for the delay and Doppler
transforms, so fractional-sample shifts are exact.
"""

import logging
from collections.abc import Callable

import numpy as np
import numpy.typing as npt

from spacecomm_sim.simulator.signal import SampledSignal, SignalParams, WaveformKind

logger = logging.getLogger(__name__)

PULSE_DUTY_CYCLE = 0.2

_Shape = Callable[[npt.NDArray[np.float64]], npt.NDArray[np.float64]]


def _sine(phase: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
  return np.sin(2 * np.pi * phase)


def _square(phase: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
  # sin == 0 counts as the positive half-cycle
  return np.where(np.sin(2 * np.pi * phase) >= 0, 1.0, -1.0)


def _sawtooth(phase: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
  return 2 * (phase - np.floor(phase + 0.5))


def _pulse(phase: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
  frac = phase - np.floor(phase)
  return np.where(frac < PULSE_DUTY_CYCLE, 1.0, 0.0)


# Unit-amplitude shape per kind
WAVEFORM_SHAPES: dict[WaveformKind, _Shape] = {
  WaveformKind.SINE: _sine,
  WaveformKind.SQUARE: _square,
  WaveformKind.SAWTOOTH: _sawtooth,
  WaveformKind.PULSE: _pulse,
}


def evaluate(
  kind: WaveformKind, amplitude: float, phase: npt.ArrayLike
) -> npt.NDArray[np.float64]:
  """Evaluate a waveform at the given phases.

  Args:
    kind: Waveform shape.
    amplitude: Peak amplitude.
    phase: Phase in cycles (frequency * t), scalar or array.

  Returns:
    Waveform values, same shape as `phase`.
  """
  shape = WAVEFORM_SHAPES[WaveformKind(kind)]
  return amplitude * shape(np.asarray(phase, dtype=np.float64))


def evaluate_at(
  params: SignalParams, t: npt.ArrayLike
) -> npt.NDArray[np.float64]:
  """Evaluate the waveform described by `params` at arbitrary instants."""
  return evaluate(
    params.waveform_kind,
    params.amplitude,
    params.frequency * np.asarray(t, dtype=np.float64),
  )


def generate(params: SignalParams) -> SampledSignal:
  """Synthesize a sampled baseband signal.

  Produces floor(duration * sampling_rate) samples at t = i / sampling_rate.
  A zero sample count yields an empty signal.

  Args:
    params: Generator configuration.

  Returns:
    The generated signal.
  """
  n = params.num_samples
  t = np.arange(n, dtype=np.float64) / params.sampling_rate
  logger.debug(
    f"Generating {n} samples of {params.waveform_kind} at "
    f"{params.frequency} Hz, fs={params.sampling_rate} Hz"
  )
  return SampledSignal(time=t, values=evaluate_at(params, t))
