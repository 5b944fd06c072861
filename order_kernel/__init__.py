"""
Order Kernel

Single-order processing pipeline with:
- Deterministic priority scoring
- Atomic per-product stock reservation
- Delivery estimation from priority
- Confirmation notification and XML audit snapshot
"""

__version__ = "0.1.0"
