"""Batch orchestration.

- batch: directory scan, backpressure admission and the worker pool.
"""
