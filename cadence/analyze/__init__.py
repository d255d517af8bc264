"""
cadence.analyze - Delivery analysis.

Pipeline Stages 2-8: Condition and frame the decoded signal, then extract
energy, pitch, prosody, rhythm and filler metrics and assemble them into
one delivery report.
"""

from __future__ import annotations
