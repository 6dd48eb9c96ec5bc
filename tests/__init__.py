"""Tests for the Atomberg Fan integration."""
