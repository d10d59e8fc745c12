"""Pydantic request/response models for the HTTP API (camelCase on the wire)."""
