"""
cadence.decode - Audio decoding.

Pipeline Stage 1: Turn an encoded audio buffer (any container/codec
libsndfile or FFmpeg can read) into mono float samples at the canonical
analysis rate.
"""

from __future__ import annotations
