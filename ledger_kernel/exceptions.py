"""
Typed Exception Hierarchy for the Ledger Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Every business-rule violation is a discrete, named condition.  Callers catch
by type, API boundaries translate by ``code``, logs carry structured data:

    try:
        service.create_category(tenant_id, data, actor_id)
    except CategoryNameExistsError as e:
        api_response(code=e.code, name=e.name)
    except AccountRoleMismatchError as e:
        api_response(code=e.code, account_id=e.account_id)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    LedgerKernelError (base)
    |
    +-- ItemCategoryError
    |   +-- ItemCategoryNotFoundError
    |   +-- ItemCategoriesNotFoundError
    |   +-- CategoryNameExistsError
    |
    +-- ItemError
    |   +-- ItemNotFoundError
    |   +-- ItemNameExistsError
    |   +-- InventoryAccountRequiredError
    |   +-- InvalidItemTypeError
    |
    +-- AccountError
    |   +-- AccountNotFoundError
    |   |   +-- SellAccountNotFoundError
    |   |   +-- CostAccountNotFoundError
    |   |   +-- InventoryAccountNotFoundError
    |   +-- AccountRoleMismatchError
    |   |   +-- SellAccountNotIncomeError
    |   |   +-- CostAccountNotCogsError
    |   |   +-- InventoryAccountNotInventoryError
    |   +-- AccountInactiveError
    |
    +-- JournalError
    |   +-- UnbalancedEntryError
    |   +-- InvalidJournalLineError
    |   +-- JournalNumberExistsError
    |
    +-- DynamicListError
    |   +-- InvalidSortColumnError
    |   +-- InvalidFilterFieldError
    |   +-- InvalidFilterComparatorError
    |   +-- MalformedFilterError
    |
    +-- ReportError
        +-- InvalidReportQueryError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category      | Code                             | When Raised
--------------|----------------------------------|--------------------------------------
Item category | CATEGORY_NOT_FOUND               | Category id doesn't exist in tenant
              | ITEM_CATEGORIES_NOT_FOUND        | Bulk operation references missing ids
              | CATEGORY_NAME_EXISTS             | Name already used in tenant
--------------|----------------------------------|--------------------------------------
Item          | ITEM_NOT_FOUND                   | Item id doesn't exist in tenant
              | ITEM_NAME_EXISTS                 | Name already used in tenant
              | INVENTORY_ACCOUNT_REQUIRED       | Inventory item without inventory acct
              | INVALID_ITEM_TYPE                | Item type is not a known ItemType
--------------|----------------------------------|--------------------------------------
Account       | ACCOUNT_NOT_FOUND                | Account id doesn't exist in tenant
              | SELL_ACCOUNT_NOT_FOUND           | Sell account missing
              | SELL_ACCOUNT_NOT_INCOME          | Sell account root type != income
              | COST_ACCOUNT_NOT_FOUND           | Cost account missing
              | COST_ACCOUNT_NOT_COGS            | Cost account root type != expense
              | INVENTORY_ACCOUNT_NOT_FOUND      | Inventory account missing
              | INVENTORY_ACCOUNT_NOT_INVENTORY  | Account type != inventory
              | ACCOUNT_INACTIVE                 | Posting to a deactivated account
--------------|----------------------------------|--------------------------------------
Journal       | UNBALANCED_ENTRY                 | Debits != credits
              | INVALID_JOURNAL_LINE             | Non-positive amount, too few lines
              | JOURNAL_NUMBER_EXISTS            | Journal number reused in tenant
--------------|----------------------------------|--------------------------------------
Listing       | INVALID_SORT_COLUMN              | Sort column not listable
              | INVALID_FILTER_FIELD             | Filter role field not listable
              | INVALID_FILTER_COMPARATOR        | Unknown comparator
              | MALFORMED_FILTER                 | Unparseable filter / bad pagination
--------------|----------------------------------|--------------------------------------
Report        | INVALID_REPORT_QUERY             | Bad date range or enum value
"""

from collections.abc import Iterable


class LedgerKernelError(Exception):
    """
    Base exception for all ledger errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LEDGER_KERNEL_ERROR"


# Item category exceptions


class ItemCategoryError(LedgerKernelError):
    """Base exception for item category errors."""

    code: str = "ITEM_CATEGORY_ERROR"


class ItemCategoryNotFoundError(ItemCategoryError):
    """Item category with given id was not found in the tenant."""

    code: str = "CATEGORY_NOT_FOUND"

    def __init__(self, category_id: str):
        self.category_id = category_id
        super().__init__(f"Item category not found: {category_id}")


class ItemCategoriesNotFoundError(ItemCategoryError):
    """One or more item categories of a bulk operation were not found."""

    code: str = "ITEM_CATEGORIES_NOT_FOUND"

    def __init__(self, missing_ids: Iterable[str]):
        self.missing_ids = tuple(str(i) for i in missing_ids)
        super().__init__(
            f"Item categories not found: {', '.join(self.missing_ids)}"
        )


class CategoryNameExistsError(ItemCategoryError):
    """Another item category in the tenant already has this name."""

    code: str = "CATEGORY_NAME_EXISTS"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Item category name already exists: {name}")


# Item exceptions


class ItemError(LedgerKernelError):
    """Base exception for item errors."""

    code: str = "ITEM_ERROR"


class ItemNotFoundError(ItemError):
    """Item with given id was not found in the tenant."""

    code: str = "ITEM_NOT_FOUND"

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Item not found: {item_id}")


class ItemNameExistsError(ItemError):
    """Another item in the tenant already has this name."""

    code: str = "ITEM_NAME_EXISTS"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Item name already exists: {name}")


class InventoryAccountRequiredError(ItemError):
    """Inventory-tracked items must reference an inventory account."""

    code: str = "INVENTORY_ACCOUNT_REQUIRED"

    def __init__(self, item_name: str):
        self.item_name = item_name
        super().__init__(f"Inventory item requires an inventory account: {item_name}")


class InvalidItemTypeError(ItemError):
    """Item type is not one of the known item types."""

    code: str = "INVALID_ITEM_TYPE"

    def __init__(self, item_type: str):
        self.item_type = item_type
        super().__init__(f"Unknown item type: {item_type}")


# Account exceptions


class AccountError(LedgerKernelError):
    """Base exception for account errors."""

    code: str = "ACCOUNT_ERROR"


class AccountNotFoundError(AccountError):
    """Account was not found in the tenant."""

    code: str = "ACCOUNT_NOT_FOUND"
    role: str | None = None

    def __init__(self, account_id: str):
        self.account_id = account_id
        label = f"{self.role} account" if self.role else "Account"
        super().__init__(f"{label.capitalize()} not found: {account_id}")


class SellAccountNotFoundError(AccountNotFoundError):
    """Referenced sell account does not exist."""

    code: str = "SELL_ACCOUNT_NOT_FOUND"
    role = "sell"


class CostAccountNotFoundError(AccountNotFoundError):
    """Referenced cost account does not exist."""

    code: str = "COST_ACCOUNT_NOT_FOUND"
    role = "cost"


class InventoryAccountNotFoundError(AccountNotFoundError):
    """Referenced inventory account does not exist."""

    code: str = "INVENTORY_ACCOUNT_NOT_FOUND"
    role = "inventory"


class AccountRoleMismatchError(AccountError):
    """
    Account exists but cannot serve the requested role.

    ``expected`` names the required root type or account type.
    """

    code: str = "ACCOUNT_ROLE_MISMATCH"
    role: str = ""
    expected: str = ""

    def __init__(self, account_id: str, actual: str):
        self.account_id = account_id
        self.actual = actual
        super().__init__(
            f"{self.role.capitalize()} account {account_id} must be "
            f"{self.expected}, got {actual}"
        )


class SellAccountNotIncomeError(AccountRoleMismatchError):
    """Sell account is not an income account."""

    code: str = "SELL_ACCOUNT_NOT_INCOME"
    role = "sell"
    expected = "income"


class CostAccountNotCogsError(AccountRoleMismatchError):
    """Cost account is not an expense (COGS or expense) account."""

    code: str = "COST_ACCOUNT_NOT_COGS"
    role = "cost"
    expected = "expense"


class InventoryAccountNotInventoryError(AccountRoleMismatchError):
    """Inventory account is not of the inventory account type."""

    code: str = "INVENTORY_ACCOUNT_NOT_INVENTORY"
    role = "inventory"
    expected = "inventory"


class AccountInactiveError(AccountError):
    """Account is not active for posting."""

    code: str = "ACCOUNT_INACTIVE"

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account is inactive: {account_id}")


# Journal exceptions


class JournalError(LedgerKernelError):
    """Base exception for journal errors."""

    code: str = "JOURNAL_ERROR"


class UnbalancedEntryError(JournalError):
    """Journal entry debits do not equal credits."""

    code: str = "UNBALANCED_ENTRY"

    def __init__(self, debits: str, credits: str):
        self.debits = debits
        self.credits = credits
        super().__init__(f"Entry is unbalanced: debits={debits}, credits={credits}")


class InvalidJournalLineError(JournalError):
    """Journal line is structurally invalid."""

    code: str = "INVALID_JOURNAL_LINE"

    def __init__(self, reason: str, line_index: int | None = None):
        self.reason = reason
        self.line_index = line_index
        where = f" (line {line_index})" if line_index is not None else ""
        super().__init__(f"Invalid journal line{where}: {reason}")


class JournalNumberExistsError(JournalError):
    """Journal number already used in the tenant."""

    code: str = "JOURNAL_NUMBER_EXISTS"

    def __init__(self, journal_number: str):
        self.journal_number = journal_number
        super().__init__(f"Journal number already exists: {journal_number}")


# Dynamic list exceptions


class DynamicListError(LedgerKernelError):
    """Base exception for list filtering errors."""

    code: str = "DYNAMIC_LIST_ERROR"


class InvalidSortColumnError(DynamicListError):
    """Requested sort column is not listable on the model."""

    code: str = "INVALID_SORT_COLUMN"

    def __init__(self, column: str):
        self.column = column
        super().__init__(f"Cannot sort by column: {column}")


class InvalidFilterFieldError(DynamicListError):
    """Filter role references a field the model does not expose."""

    code: str = "INVALID_FILTER_FIELD"

    def __init__(self, field_key: str):
        self.field_key = field_key
        super().__init__(f"Cannot filter by field: {field_key}")


class InvalidFilterComparatorError(DynamicListError):
    """Filter role uses an unknown comparator."""

    code: str = "INVALID_FILTER_COMPARATOR"

    def __init__(self, comparator: str):
        self.comparator = comparator
        super().__init__(f"Unknown filter comparator: {comparator}")


class MalformedFilterError(DynamicListError):
    """Filter payload cannot be parsed or has invalid pagination."""

    code: str = "MALFORMED_FILTER"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Malformed list filter: {reason}")


# Report exceptions


class ReportError(LedgerKernelError):
    """Base exception for report errors."""

    code: str = "REPORT_ERROR"


class InvalidReportQueryError(ReportError):
    """Report query parameters are invalid."""

    code: str = "INVALID_REPORT_QUERY"

    def __init__(self, parameter: str, reason: str):
        self.parameter = parameter
        self.reason = reason
        super().__init__(f"Invalid report parameter {parameter}: {reason}")
