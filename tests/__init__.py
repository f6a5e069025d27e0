"""Unit tests for tlai.

This package contains test modules for all components of the tlai application.
"""
