"""Lifelog: personal life-logging service."""
