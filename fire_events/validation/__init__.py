"""
Data validation utilities for FIRMS detection input.
"""

from .data_validator import validate_detection_frame, print_validation_report, validate_and_report

__all__ = ['validate_detection_frame', 'print_validation_report', 'validate_and_report']
