"""Heuristic risk scan.

This module flags obviously suspicious source files with a shallow
substring check. It makes no security guarantee.
"""
