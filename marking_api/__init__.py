"""Marking API - HTTP adapter around the marking engine."""
