"""
Field Reorder - reorder struct literal and pattern fields to declaration order
"""

__version__ = "1.0.0"
