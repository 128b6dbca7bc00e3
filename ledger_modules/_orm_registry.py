"""
Module ORM Registry (``ledger_modules._orm_registry``).

Responsibility
--------------
Ensure kernel and module SQLAlchemy ORM models are imported so that
``Base.metadata`` contains their table definitions before tables are
created.

Usage
-----
``ledger_kernel.db.engine.create_tables()`` and ``tests/conftest.py`` call
``import_all_orm_models()`` before ``create_all()``.
"""


def import_all_orm_models() -> None:
    """Import kernel models and every ``ledger_modules.*.orm`` module.

    Kernel models must be registered first: module tables carry foreign
    keys to ``accounts.id``.  Idempotent.
    """
    import ledger_kernel.models  # noqa: F401
    import ledger_modules.items.orm  # noqa: F401
