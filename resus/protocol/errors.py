"""Exceptions raised by the resuscitation engine."""

from __future__ import annotations


class ResusError(Exception):
    """Base class for resus-clock errors."""


class InvalidSessionError(ResusError, ValueError):
    """Construction parameters are malformed (weight, rhythm, scenario id)."""
