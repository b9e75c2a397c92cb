# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Core infrastructure for seqrun.

This module collects the foundational helpers used across the seqrun
codebase: configuration, error types and structured logging.
"""
