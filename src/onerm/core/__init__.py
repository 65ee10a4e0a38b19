"""Estimation engine: model tables, calibration and the fatigue model."""
