"""Workflow tools built on the resource client."""
