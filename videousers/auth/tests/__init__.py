"""Tests for :mod:`videousers.auth`."""
