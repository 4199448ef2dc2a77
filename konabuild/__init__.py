"""
konabuild — test-selection and release policy for the Kona provider modules.
"""

__version__ = "0.1.0"
