"""Shared helpers for docsnap: image conversion and logging setup."""
