"""
Core modules for the Copilot dashboard.

This package contains metrics derivation, adoption classification,
synthetic fallback data and the data loading sequence.
"""
