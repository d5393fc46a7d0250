"""Pydantic AI agents for reviewing changes and discussing suggestions."""
