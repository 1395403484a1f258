"""Laplace noise, confidence intervals and partition-selection thresholds for differential privacy."""
