"""Pydantic request schemas and the response envelope."""
