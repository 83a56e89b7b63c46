"""
brainstats: population-referenced cognitive and lateralization indices from
FreeSurfer cortical morphometry.
"""

__version__ = "0.1.0"
