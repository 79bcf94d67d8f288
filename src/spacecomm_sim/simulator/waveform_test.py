"""Tests for the waveform generator and signal value types."""

import numpy as np
import pytest
from pydantic import ValidationError

from spacecomm_sim.simulator.signal import SampledSignal, SignalParams, WaveformKind
from spacecomm_sim.simulator.waveform import evaluate, generate


def make_params(kind: WaveformKind = WaveformKind.SINE, **overrides) -> SignalParams:
  fields = {
    "frequency": 5.0,
    "amplitude": 1.0,
    "duration": 1.0,
    "sampling_rate": 1000.0,
    "waveform_kind": kind,
  }
  fields.update(overrides)
  return SignalParams(**fields)


class TestSignalParams:
  """Tests for SignalParams validation."""

  @pytest.mark.parametrize(
    "field", ["frequency", "amplitude", "duration", "sampling_rate"]
  )
  @pytest.mark.parametrize("value", [0.0, -1.0])
  def test_non_positive_rejected(self, field, value) -> None:
    """All numeric generator fields must be strictly positive."""
    with pytest.raises(ValidationError):
      make_params(**{field: value})

  def test_unknown_kind_rejected(self) -> None:
    """Only the four waveform kinds are accepted."""
    with pytest.raises(ValidationError):
      make_params(kind="triangle")

  def test_kind_from_string(self) -> None:
    """Kinds can be given by their string value."""
    params = make_params(kind="sawtooth")
    assert params.waveform_kind is WaveformKind.SAWTOOTH

  def test_frozen(self) -> None:
    """Params are immutable."""
    params = make_params()
    with pytest.raises(ValidationError):
      params.frequency = 10.0


class TestSampledSignal:
  """Tests for SampledSignal."""

  def test_arrays_are_read_only(self) -> None:
    """Neither array can be written in place."""
    signal = SampledSignal(time=[0.0, 0.5], values=[1.0, 2.0])
    with pytest.raises(ValueError):
      signal.values[0] = 5.0
    with pytest.raises(ValueError):
      signal.time[0] = 5.0

  def test_input_array_is_copied(self) -> None:
    """Editing the source array does not leak into the signal."""
    values = np.array([1.0, 2.0])
    signal = SampledSignal(time=[0.0, 0.5], values=values)
    values[0] = 99.0
    assert signal.values[0] == 1.0

  def test_unequal_lengths_rejected(self) -> None:
    """Time and value arrays must have equal length."""
    with pytest.raises(ValidationError):
      SampledSignal(time=[0.0, 0.5, 1.0], values=[1.0, 2.0])

  @pytest.mark.parametrize(
    "time", [[0.0, 0.5, 0.25], [1.0, 0.5, 0.0], [0.0, 0.5, 0.5]]
  )
  def test_non_increasing_time_rejected(self, time) -> None:
    """The time axis must be strictly increasing."""
    with pytest.raises(ValidationError, match="strictly increasing"):
      SampledSignal(time=time, values=[1.0, 2.0, 3.0])

  def test_with_values_shares_time_axis(self) -> None:
    """Derived signals keep the original time axis."""
    signal = SampledSignal(time=[0.0, 0.5], values=[1.0, 2.0])
    derived = signal.with_values([3.0, 4.0])
    assert derived.time is signal.time
    np.testing.assert_array_equal(signal.values, [1.0, 2.0])
    np.testing.assert_array_equal(derived.values, [3.0, 4.0])

  def test_empty(self) -> None:
    """The empty signal has no samples."""
    assert len(SampledSignal.empty()) == 0


class TestGenerate:
  """Tests for generate."""

  def test_quarter_period_sine(self) -> None:
    """1 Hz sine sampled at 4 Hz hits 0, 1, 0, -1."""
    signal = generate(
      SignalParams(
        frequency=1, amplitude=1, duration=1, sampling_rate=4, waveform_kind="sine"
      )
    )
    np.testing.assert_allclose(signal.time, [0.0, 0.25, 0.5, 0.75])
    np.testing.assert_allclose(signal.values, [0.0, 1.0, 0.0, -1.0], atol=1e-12)

  @pytest.mark.parametrize("kind", list(WaveformKind))
  @pytest.mark.parametrize(
    ("duration", "sampling_rate"), [(1.0, 1000.0), (0.37, 250.0), (2.5, 33.0)]
  )
  def test_sample_count_and_time_axis(self, kind, duration, sampling_rate) -> None:
    """floor(duration * fs) samples at t = i / fs."""
    params = make_params(kind, duration=duration, sampling_rate=sampling_rate)
    signal = generate(params)
    n = int(np.floor(duration * sampling_rate))
    assert len(signal) == n
    assert len(signal.time) == n
    np.testing.assert_array_equal(signal.time, np.arange(n) / sampling_rate)

  def test_too_short_duration_is_empty(self) -> None:
    """Less than one sample period yields an empty signal, not an error."""
    signal = generate(make_params(duration=0.0005, sampling_rate=1000.0))
    assert len(signal) == 0

  def test_deterministic(self) -> None:
    """Same params give identical output."""
    params = make_params(WaveformKind.SAWTOOTH, frequency=3.3)
    np.testing.assert_array_equal(generate(params).values, generate(params).values)

  @pytest.mark.parametrize("amplitude", [0.5, 2.0])
  def test_square_levels(self, amplitude) -> None:
    """Square wave only takes +/- amplitude, starting positive at t=0."""
    signal = generate(make_params(WaveformKind.SQUARE, amplitude=amplitude))
    assert set(np.unique(signal.values)) == {-amplitude, amplitude}
    assert signal.values[0] == amplitude

  def test_square_zero_crossing_is_positive(self) -> None:
    """sin == 0 maps to +1."""
    assert evaluate(WaveformKind.SQUARE, 1.0, 0.0) == 1.0

  def test_sawtooth_range(self) -> None:
    """Sawtooth stays within [-A, A)."""
    signal = generate(make_params(WaveformKind.SAWTOOTH, amplitude=2.0))
    assert signal.values.min() >= -2.0
    assert signal.values.max() < 2.0

  def test_sawtooth_values(self) -> None:
    """Sawtooth is 2 * (phase - round-half-up(phase))."""
    np.testing.assert_allclose(
      evaluate(WaveformKind.SAWTOOTH, 1.0, [0.0, 0.25, 0.5, 0.75, 1.25]),
      [0.0, 0.5, -1.0, -0.5, 0.5],
    )

  def test_pulse_duty_cycle(self) -> None:
    """Pulse is high for 20% of each period."""
    signal = generate(make_params(WaveformKind.PULSE, frequency=10.0, amplitude=3.0))
    assert set(np.unique(signal.values)) == {0.0, 3.0}
    duty = np.mean(signal.values > 0)
    assert duty == pytest.approx(0.2, abs=0.01)

  def test_pulse_values(self) -> None:
    """Pulse edges fall at frac(phase) = 0.2."""
    np.testing.assert_array_equal(
      evaluate(WaveformKind.PULSE, 1.0, [0.0, 0.1, 0.2, 0.5, 1.05]),
      [1.0, 1.0, 0.0, 0.0, 1.0],
    )
