"""Core application plumbing: configuration, logging and exceptions."""
