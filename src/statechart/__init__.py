"""Script-visible SCXML system variables for a statechart interpreter."""
