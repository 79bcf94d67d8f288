"""Simulator module for point-to-point space communication links."""

from spacecomm_sim.simulator import links
from spacecomm_sim.simulator.chart import downsample, format_delay
from spacecomm_sim.simulator.impairments import (
  SPEED_OF_LIGHT_KM_S,
  ChannelImpairment,
  ChannelSimulator,
  DopplerShift,
  GaussianNoise,
  ImpairmentStage,
  LinkResult,
  MovingAverage,
  PathLoss,
  PropagationDelay,
  add_noise,
  attenuate,
  attenuation_db,
  compute_delay,
  compute_doppler_frequency,
  delay,
  doppler_signal,
  smooth,
)
from spacecomm_sim.simulator.links import LinkPreset
from spacecomm_sim.simulator.metrics import (
  SignalShapeMismatchError,
  compute_snr,
  dominant_frequency,
  erfc,
  estimate_ber,
)
from spacecomm_sim.simulator.signal import (
  ChartPoint,
  SampledSignal,
  SignalParams,
  WaveformKind,
)
from spacecomm_sim.simulator.waveform import generate

__all__ = [
  "SPEED_OF_LIGHT_KM_S",
  # Signal types
  "ChartPoint",
  "SampledSignal",
  "SignalParams",
  "WaveformKind",
  # Composable impairments
  "ChannelImpairment",
  "ChannelSimulator",
  "DopplerShift",
  "GaussianNoise",
  "ImpairmentStage",
  "LinkPreset",
  "LinkResult",
  "MovingAverage",
  "PathLoss",
  "PropagationDelay",
  "SignalShapeMismatchError",
  # Transforms and metrics
  "add_noise",
  "attenuate",
  "attenuation_db",
  "compute_delay",
  "compute_doppler_frequency",
  "compute_snr",
  "delay",
  "dominant_frequency",
  "doppler_signal",
  "downsample",
  "erfc",
  "estimate_ber",
  "format_delay",
  "generate",
  "links",
  "smooth",
]
