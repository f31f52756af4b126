"""Integrity fingerprint layer.

This module computes deterministic per-tree fingerprints and diffs
checked-out trees against previously registered ones.
"""
