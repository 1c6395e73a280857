"""Duration and noise generation for traffic sources.

This module provides Pareto inverse-transform sampling and fractional
Gaussian noise generation.
"""
