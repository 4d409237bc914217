"""
Test suite for ymlib.

Contains:
- tests/unit/ : Unit tests for individual modules
"""
