"""Nearby-place recommendations from hosted LLM completion APIs."""
