"""Prompts for the analysis agents."""
