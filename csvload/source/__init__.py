# ==============================================
# TOPIC 1: RECORD SOURCE
# ==============================================
#
# This package reads the delimited input file as rows of
# named text fields. It knows nothing about types.
#
# Modules:
# --------
# - csv_source.py  → CsvSource: header + re-readable row iteration
#
# ==============================================

from .csv_source import CsvSource

__all__ = ["CsvSource"]
