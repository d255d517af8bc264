"""
Cadence - speech delivery metrics engine.

Turns one recorded speech sample (plus optional word timestamps from a
transcription service) into delivery metrics for coaching feedback:
audio decoding → high-pass conditioning → framing → energy and pitch
analysis → prosody alignment → rhythm statistics → filler scan.
"""

__version__ = "0.1.0"
