"""Scheduled workers."""
