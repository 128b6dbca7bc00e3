"""
Business modules built on the ledger kernel.

- items: item categories and items
- reporting: financial statements (profit & loss sheet)
"""
