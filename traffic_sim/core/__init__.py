"""Core components for traffic simulation.

This module contains the fundamental classes for the discrete-event engine,
including Event, TrafficSource, BoundedQueue, StatisticsAggregator and
SimulationManager.
"""
