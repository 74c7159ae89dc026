"""Run healthcheck scripts in parallel and report pass/fail."""

__version__ = "1.1.0"
