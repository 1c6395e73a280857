"""Self-similar ON/OFF traffic simulation.

This package simulates the aggregate rate produced by a population of
independent ON/OFF sources with heavy-tailed sojourn times, feeds it through
a bounded queue and estimates the Hurst exponent of the resulting series.
"""

__version__ = "0.1.0"
