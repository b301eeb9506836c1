"""Shared utilities for cvcanvas."""
