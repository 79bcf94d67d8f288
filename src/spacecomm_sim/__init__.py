"""Deep-space communication link simulator."""
