"""Lecture PDF sync worker."""
