# slotsim/__init__.py
"""
slotsim - payline slot machine mathematics

This package contains:
- Seedable RNG strategies with weighted symbol sampling
- Payline evaluation with wild substitution
- Live-play sessions and batch RTP simulation with audit reports
"""

__version__ = "1.0.0"
__description__ = "Deterministic payline slot machine evaluation and simulation"
