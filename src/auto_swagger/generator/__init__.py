"""Swagger document generation."""
