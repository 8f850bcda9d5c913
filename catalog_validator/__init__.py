"""
Catalog Validator — Referential-integrity checks for a taxonomy-backed catalog.

Architecture: Concurrent load → Taxonomy index → Per-entry checks → Streaming report
Philosophy:  Report every defect in one pass. Abort only when nothing can be checked.
"""

__version__ = "1.0.0"
