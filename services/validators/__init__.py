"""Validators for service inputs."""

from .data_validator import DataValidator

__all__ = [
    'DataValidator'
]
