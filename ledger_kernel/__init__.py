"""
Ledger Kernel

Shared core for the multi-tenant accounting back office:
- Tenant-scoped persistence (accounts, journals)
- Typed, code-carrying exceptions
- Structured JSON logging
- Domain events with an explicit outbound queue
- Generic list filtering, sorting and pagination
"""

__version__ = "0.1.0"
