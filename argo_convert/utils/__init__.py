"""
Utilities package for the ARGO converter

This package provides the batch conversion pipeline.
"""

from .data_pipeline import (
    BatchConverter,
    FileResult,
    convert_directory
)

__all__ = [
    'BatchConverter',
    'FileResult',
    'convert_directory'
]
