"""
Well Pump Estimator Core Package
Submersible pump sizing and line-item pricing engine
"""

__version__ = "0.1.0"

from . import engine
from . import infra

__all__ = ["engine", "infra"]
