"""Tests for :mod:`videousers.controllers`."""
