"""splitkeeper: segment timing with personal bests and live comparisons."""

__version__ = "0.1.0"
