"""Shared helpers: command execution, logging, file editing and orchestration."""
