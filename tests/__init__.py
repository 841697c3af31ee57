"""Tests for the ERG tracking backend."""
