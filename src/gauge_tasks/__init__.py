"""
Development tasks runner of the canvas gauge library: build, packaging, quality gates and coverage badge.
"""

__version__ = "0.1.0"
