"""Registry persistence layer.

This module loads and saves acquired-repository records and registered
fingerprints as one JSON document.
"""
