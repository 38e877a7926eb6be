"""guided-lift: guided strength workouts in the terminal."""

__version__ = "0.1.0"
