"""
Command-line interface for stellarsynth.

This module provides CLI tools for:
- Synthesis from config files
- Instrumental degradation and rectification of spectra
"""

__all__ = []
