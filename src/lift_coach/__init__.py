"""lift-coach: per-exercise progression and live session sequencing for strength training."""

__version__ = "0.1.0"
