# ==============================================
# TOPIC 2: NORMALIZATION
# ==============================================
#
# This package turns raw header names and raw text values into
# the forms the rest of the pipeline needs.
#
# Modules:
# --------
# - type_detector.py         → "Parses as" tests for int / float / date / boolean
# - identifier_normalizer.py → Header name → safe column / table identifier
#
# ==============================================

from .type_detector import TypeDetector
from .identifier_normalizer import IdentifierNormalizer

__all__ = ["TypeDetector", "IdentifierNormalizer"]
