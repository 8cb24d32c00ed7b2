"""
Civic Triage - municipal complaint classification

Rule-based triage of citizen complaints by priority, sentiment and
department, plus dashboard insights over classified complaints.
"""

__version__ = "0.1.0"

# Import main components
from .core.config import get_config
from .core.logger import get_logger
from .classification import ComplaintClassifier, get_complaint_classifier

__all__ = [
    "get_config",
    "get_logger",
    "ComplaintClassifier",
    "get_complaint_classifier",
]
