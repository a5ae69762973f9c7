"""Pydantic schemas for the Lifelog API."""
