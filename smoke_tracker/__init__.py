"""Smoking-cessation tracker: event log and derived statistics."""
