"""
Parish Ledger - Source Package

Donation and expense bookkeeping for a small parish.

DESIGN PRINCIPLES:
1. The computation engine is pure: snapshots in, derived views out
2. Reject malformed input at ingestion, never partially aggregate it
3. Categories are structured values internally, strings only on the wire
4. Storage is an injected collaborator
"""

__version__ = "1.0.0"
__author__ = "Parish Ledger Team"
