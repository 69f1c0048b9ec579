"""
Companion Policy

Policy components behind the companion chat backend:
- Summary regeneration gate (time + message-count debounce)
- Understanding level curves (tiered table, square-root decay)
"""

__version__ = "0.1.0"
