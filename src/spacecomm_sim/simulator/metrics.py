"""Link quality metrics.

SNR compares an observed signal against its noiseless reference; the bit
error rate estimate assumes BPSK over an AWGN channel:

  BER = 0.5 * erfc(sqrt(SNR_linear))

References:
  - M. Abramowitz & I. Stegun, "Handbook of Mathematical Functions",
    formula 7.1.26 (rational approximation of erf, |error| <= 1.5e-7)
"""

import numpy as np
import numpy.typing as npt
from scipy import signal as scipy_signal

from spacecomm_sim.simulator.signal import SampledSignal

# Abramowitz & Stegun 7.1.26 coefficients
_P = 0.3275911
_A = (0.254829592, -0.284496736, 1.421413741, -1.453152027, 1.061405429)


class SignalShapeMismatchError(ValueError):
  """Raised when two signals compared sample-by-sample are not aligned."""


def _check_aligned(reference: SampledSignal, observed: SampledSignal) -> None:
  if len(reference) != len(observed):
    msg = (
      f"Cannot compare signals of different length: "
      f"{len(reference)} vs {len(observed)} samples"
    )
    raise SignalShapeMismatchError(msg)
  if not reference.same_time_axis(observed):
    msg = "Cannot compare signals sampled on different time axes"
    raise SignalShapeMismatchError(msg)


def compute_snr(reference: SampledSignal, observed: SampledSignal) -> float:
  """Signal-to-noise ratio of `observed` against `reference`, in dB.

  Signal power is the energy of `reference`; noise power is the energy of
  the difference. Returns +inf when the signals are identical.

  Raises:
    SignalShapeMismatchError: If the signals are not sample-aligned.
  """
  _check_aligned(reference, observed)
  signal_power = float(np.sum(reference.values**2))
  noise_power = float(np.sum((observed.values - reference.values) ** 2))
  if noise_power == 0:
    return float("inf")
  with np.errstate(divide="ignore"):
    return float(10 * np.log10(signal_power / noise_power))


def erfc(x: npt.ArrayLike) -> npt.NDArray[np.float64] | float:
  """Complementary error function, Abramowitz & Stegun approximation.

  Accurate to 1.5e-7 absolute. Negative arguments use
  erfc(-x) = 2 - erfc(x).

  Args:
    x: Scalar or array argument.

  Returns:
    erfc(x), a float for scalar input and an array otherwise.
  """
  arr = np.asarray(x, dtype=np.float64)
  sign = np.where(arr < 0, -1.0, 1.0)
  z = np.abs(arr)
  t = 1.0 / (1.0 + _P * z)
  a1, a2, a3, a4, a5 = _A
  poly = ((((a5 * t + a4) * t + a3) * t + a2) * t + a1) * t
  erf_abs = 1.0 - poly * np.exp(-z * z)
  result = 1.0 - sign * erf_abs
  if result.ndim == 0:
    return float(result)
  return result


def estimate_ber(snr_db: npt.ArrayLike) -> npt.NDArray[np.float64] | float:
  """Bit error rate estimate for BPSK at the given SNR in dB.

  +inf dB gives 0 and -inf dB gives 0.5.
  """
  with np.errstate(over="ignore"):
    snr_linear = np.power(10.0, np.asarray(snr_db, dtype=np.float64) / 10)
  return 0.5 * erfc(np.sqrt(snr_linear))


def dominant_frequency(signal: SampledSignal) -> float:
  """Frequency in Hz of the strongest non-DC spectral component.

  Uses the periodogram of the signal, so resolution is the sampling rate
  divided by the number of samples.

  Raises:
    ValueError: If the signal has fewer than two samples.
  """
  if len(signal) < 2:
    msg = f"Need at least 2 samples to estimate a frequency, got {len(signal)}"
    raise ValueError(msg)
  fs = 1.0 / (signal.time[1] - signal.time[0])
  freqs, pxx = scipy_signal.periodogram(signal.values, fs=fs, detrend="constant")
  return float(freqs[1:][np.argmax(pxx[1:])])
