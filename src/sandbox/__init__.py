"""Isolated execution layer.

This module runs the version-control tool inside a bubblewrap profile
and probes git metadata of checked-out trees.
"""
