"""Tests for the link preset library."""

import numpy as np
import pytest
from pydantic import ValidationError

from spacecomm_sim.simulator import links
from spacecomm_sim.simulator.impairments import (
  ChannelImpairment,
  ChannelSimulator,
  DopplerShift,
  GaussianNoise,
  MovingAverage,
  PathLoss,
  PropagationDelay,
  compute_delay,
)
from spacecomm_sim.simulator.signal import SignalParams


class TestPresets:
  """Tests for the preset records."""

  def test_all_presets_registered(self) -> None:
    """Every module-level preset can be looked up by key."""
    assert set(links.PRESETS) == {"iss", "moon", "mars_min", "mars_max", "jupiter"}
    assert links.get("moon") is links.MOON

  def test_distances(self) -> None:
    """Preset distances match the reference quick-picks."""
    assert links.ISS.distance_km == 408.0
    assert links.MOON.distance_km == 384_400.0
    assert links.MARS_MIN.distance_km == 54_600_000.0
    assert links.MARS_MAX.distance_km == 401_000_000.0
    assert links.JUPITER.distance_km == 588_000_000.0

  def test_ordered_by_distance(self) -> None:
    """Presets run from nearest to farthest."""
    distances = [p.distance_km for p in links.PRESETS.values()]
    assert distances == sorted(distances)

  def test_mars_delay_in_minutes(self) -> None:
    """Mars is minutes of light travel away."""
    assert 3 * 60 < compute_delay(links.MARS_MIN.distance_km) < 4 * 60
    assert 22 * 60 < compute_delay(links.MARS_MAX.distance_km) < 23 * 60

  def test_unknown_preset(self) -> None:
    """Unknown keys list the valid ones."""
    with pytest.raises(KeyError, match="available: iss, moon"):
      links.get("pluto")

  def test_frozen(self) -> None:
    """Presets are immutable."""
    with pytest.raises(ValidationError):
      links.MOON.distance_km = 1.0

  def test_positive_distance_required(self) -> None:
    """A preset needs a real distance."""
    with pytest.raises(ValidationError):
      links.LinkPreset(name="x", description="x", distance_km=0.0)


class TestImpairments:
  """Tests for links.impairments."""

  @pytest.mark.parametrize("preset", list(links.PRESETS.values()))
  def test_full_chain_in_canonical_order(self, preset) -> None:
    """A preset expands to all five impairments, already sorted."""
    chain = links.impairments(preset, noise_std=0.1, filter_window=5, seed=1)
    assert all(isinstance(imp, ChannelImpairment) for imp in chain)
    assert [type(imp) for imp in chain] == [
      DopplerShift,
      PropagationDelay,
      PathLoss,
      GaussianNoise,
      MovingAverage,
    ]
    stages = [imp.stage for imp in chain]
    assert stages == sorted(stages)

  def test_chain_carries_preset_geometry(self) -> None:
    """Distance and velocity flow into the impairments."""
    chain = links.impairments(links.MARS_MIN)
    sim = ChannelSimulator(chain)
    assert sim.distance_km == links.MARS_MIN.distance_km
    assert sim.velocity_km_s == links.MARS_MIN.velocity_km_s

  def test_iss_link_end_to_end(self) -> None:
    """ISS link: sub-reference distance, so no path loss, short delay."""
    params = SignalParams(frequency=5.0, sampling_rate=1000.0)
    sim = ChannelSimulator(links.impairments(links.ISS))
    result = sim.simulate(params)

    assert len(result.received) == len(result.transmitted)
    # 408 km is about 1.4 ms: the first sample has not arrived yet
    assert result.received.values[0] == 0.0
    assert np.max(np.abs(result.received.values)) == pytest.approx(1.0, abs=1e-3)
    assert result.snr_db == np.inf

  def test_moon_link_is_silent_for_short_signal(self) -> None:
    """A 1 s signal has not reached the receiver after 1.28 s of travel."""
    params = SignalParams(frequency=5.0, sampling_rate=1000.0)
    sim = ChannelSimulator(links.impairments(links.MOON, noise_std=0.0))
    result = sim.simulate(params)
    assert np.all(result.received.values == 0.0)
