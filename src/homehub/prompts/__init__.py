"""Prompt templates bundled with HomeHub."""
