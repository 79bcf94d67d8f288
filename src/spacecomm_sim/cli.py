"""Command line interface for the link simulator.

Runs the combined simulation (Doppler -> Delay -> Path loss -> Noise ->
Filter) for one waveform and prints a JSON link report:

  spacecomm-sim simulate --preset mars_min --noise 0.2 --seed 1
  spacecomm-sim presets
"""

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from pydantic import BaseModel, ValidationError

from spacecomm_sim.config import ChannelState, SimulationConfig
from spacecomm_sim.setup_logging import setup_logging
from spacecomm_sim.simulator import links
from spacecomm_sim.simulator.chart import downsample, format_delay
from spacecomm_sim.simulator.impairments import (
  ChannelSimulator,
  DopplerShift,
  GaussianNoise,
  LinkResult,
  MovingAverage,
  PathLoss,
  PropagationDelay,
  attenuation_db,
  compute_delay,
)
from spacecomm_sim.simulator.metrics import estimate_ber
from spacecomm_sim.simulator.signal import ChartPoint, SignalParams, WaveformKind

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="Deep-space link simulator.")


class LinkReport(BaseModel):
  """Summary of a simulated link, as printed by `simulate`."""

  distance_km: float
  velocity_km_s: float
  delay_sec: float
  delay_text: str
  attenuation_db: float
  frequency_hz: float
  doppler_frequency_hz: float
  noisy_snr_db: float
  noisy_ber: float
  filtered_snr_db: float
  filtered_ber: float
  num_samples: int

  model_config = {"frozen": True, "ser_json_inf_nan": "constants"}


class ChartSeries(BaseModel):
  """Display series for the transmitted and received signals."""

  transmitted: list[ChartPoint]
  received: list[ChartPoint]


def build_channel(config: SimulationConfig) -> ChannelSimulator:
  """Impairment chain for a validated configuration."""
  state = config.channel
  return ChannelSimulator(
    [
      DopplerShift(velocity_km_s=state.velocity_km_s),
      PropagationDelay(distance_km=state.distance_km),
      PathLoss(distance_km=state.distance_km),
      GaussianNoise(std_dev=state.noise_std, seed=config.seed),
      MovingAverage(window_size=state.filter_window),
    ]
  )


def build_report(config: SimulationConfig, result: LinkResult) -> LinkReport:
  """Collect delay, path loss, Doppler and quality figures for a run."""
  state = config.channel
  delay_sec = compute_delay(state.distance_km)
  noisy_snr = result.noisy_snr_db
  filtered_snr = result.snr_db
  return LinkReport(
    distance_km=state.distance_km,
    velocity_km_s=state.velocity_km_s,
    delay_sec=delay_sec,
    delay_text=format_delay(delay_sec),
    attenuation_db=attenuation_db(state.distance_km),
    frequency_hz=result.params.frequency,
    doppler_frequency_hz=result.received_params.frequency,
    noisy_snr_db=noisy_snr,
    noisy_ber=estimate_ber(noisy_snr),
    filtered_snr_db=filtered_snr,
    filtered_ber=estimate_ber(filtered_snr),
    num_samples=len(result.transmitted),
  )


@app.command()
def simulate(
  frequency: Annotated[
    float, typer.Option("--frequency", "-f", help="Frequency in Hz.")
  ] = 5.0,
  amplitude: Annotated[float, typer.Option(help="Peak amplitude.")] = 1.0,
  duration: Annotated[float, typer.Option(help="Duration in seconds.")] = 1.0,
  sampling_rate: Annotated[
    float, typer.Option("--sampling-rate", "-s", help="Sample rate in Hz.")
  ] = 1000.0,
  kind: Annotated[
    WaveformKind, typer.Option("--kind", "-k", help="Waveform shape.")
  ] = WaveformKind.SINE,
  distance: Annotated[
    float | None,
    typer.Option("--distance", "-d", help="Link distance in km [default: 384400]."),
  ] = None,
  velocity: Annotated[
    float | None,
    typer.Option("--velocity", "-v", help="Radial velocity in km/s [default: 1000]."),
  ] = None,
  noise: Annotated[
    float, typer.Option("--noise", "-n", help="Noise standard deviation.")
  ] = 0.3,
  window: Annotated[
    int, typer.Option("--window", "-w", help="Odd filter window in samples.")
  ] = 11,
  seed: Annotated[int | None, typer.Option(help="Noise seed.")] = None,
  preset: Annotated[
    str | None,
    typer.Option(
      "--preset",
      "-p",
      help="Link preset; overrides distance and velocity (e.g., moon, mars_min).",
    ),
  ] = None,
  max_points: Annotated[
    int, typer.Option(help="Point budget for --chart series.")
  ] = 500,
  chart: Annotated[
    Path | None,
    typer.Option(help="Write downsampled chart series as JSON to this path."),
  ] = None,
  log_level: Annotated[str, typer.Option(help="Logging level.")] = "WARNING",
) -> None:
  """Simulate one transmission over the link and print a JSON report."""
  setup_logging(level=log_level)

  try:
    if preset is not None:
      link = links.get(preset)
      logger.info(f"Using link preset: {link.name} ({link.description})")
      if distance is not None or velocity is not None:
        logger.warning(f"--preset {preset} overrides --distance and --velocity")
      distance, velocity = link.distance_km, link.velocity_km_s
    geometry = {"distance_km": distance, "velocity_km_s": velocity}
    config = SimulationConfig(
      signal=SignalParams(
        frequency=frequency,
        amplitude=amplitude,
        duration=duration,
        sampling_rate=sampling_rate,
        waveform_kind=kind,
      ),
      channel=ChannelState(
        noise_std=noise,
        filter_window=window,
        **{k: v for k, v in geometry.items() if v is not None},
      ),
      seed=seed,
      max_points=max_points,
    )
  except KeyError as e:
    logger.error(e.args[0])
    sys.exit(1)
  except ValidationError as e:
    logger.error(f"Invalid simulation parameters:\n{e}")
    sys.exit(1)

  channel = build_channel(config)
  logger.info(f"Channel: {channel.name}")
  result = channel.simulate(config.signal)
  report = build_report(config, result)

  if chart is not None:
    series = ChartSeries(
      transmitted=downsample(result.transmitted, config.max_points),
      received=downsample(result.received, config.max_points),
    )
    chart.write_text(series.model_dump_json(indent=2))
    logger.info(f"Saved chart series to {chart}")

  typer.echo(report.model_dump_json(indent=2))


@app.command()
def presets() -> None:
  """List the available link presets."""
  for key, link in links.PRESETS.items():
    delay_text = format_delay(compute_delay(link.distance_km))
    typer.echo(
      f"{key:<10} {link.name:<12} {link.distance_km:>16,.0f} km  "
      f"{link.velocity_km_s:>+8.2f} km/s  {delay_text}"
    )


def main() -> None:
  """Console script entry point."""
  app()


if __name__ == "__main__":
  main()
