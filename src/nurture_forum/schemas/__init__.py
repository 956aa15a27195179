"""Pydantic schemas for the forum API."""
