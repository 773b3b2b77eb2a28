"""Outfit recommendation ranking engine."""
