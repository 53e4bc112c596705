"""Tests for :mod:`videousers.services`."""
