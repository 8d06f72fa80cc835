"""Shared utilities for switchboard."""
