"""Shared test fixtures for cabalkit tests."""
