"""Display helpers. Nothing here is used inside the numerical pipeline."""

from spacecomm_sim.simulator.signal import ChartPoint, SampledSignal

DEFAULT_MAX_POINTS = 500


def downsample(
  signal: SampledSignal, max_points: int = DEFAULT_MAX_POINTS
) -> list[ChartPoint]:
  """Reduce a signal for plotting by keeping every stride-th sample.

  The stride is max(1, n // max_points), starting at index 0. This is plain
  sub-sampling without averaging, so the output may hold up to
  2 * max_points - 1 points when n is not a multiple of max_points.

  Raises:
    ValueError: If `max_points` is less than 1.
  """
  if max_points < 1:
    msg = f"max_points must be >= 1, got {max_points}"
    raise ValueError(msg)
  stride = max(1, len(signal) // max_points)
  return [
    ChartPoint(time=float(t), value=float(v))
    for t, v in zip(signal.time[::stride], signal.values[::stride], strict=True)
  ]


def format_delay(seconds: float) -> str:
  """Human readable delay: ms below 1 s, then s, min and hours."""
  if seconds < 1:
    return f"{seconds * 1000:.2f} ms"
  if seconds < 60:
    return f"{seconds:.2f} s"
  if seconds < 3600:
    return f"{seconds / 60:.2f} min"
  return f"{seconds / 3600:.2f} hours"
