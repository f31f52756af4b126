"""Acquisition workflow.

This module resolves sources and orchestrates the staged fetch, checkout,
verification, scan, and materialization steps behind trust decisions.
"""
