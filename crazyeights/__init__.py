"""Crazy Eights rules engine."""
