"""Tests for the :mod:`videousers` application."""
