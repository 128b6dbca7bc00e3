"""
Module: ledger_kernel.selectors.dynamic_list
Responsibility: Uniform sorting, keyword search, filter roles and pagination
    for any listable ORM model.  Services build a base ``select()`` scoped to
    the tenant and hand it to ``DynamicList`` together with the caller's
    ``ListFilter``.
Architecture position: Kernel > Selectors.  Pure query building; executes
    only the count and page queries on the session it is given.

Listable models declare two class attributes:

    LIST_FIELDS: dict[str, str]   -- public field key -> mapped attribute name
    SEARCH_FIELDS: tuple[str, ...] -- field keys or mapped attribute names
                                      matched by search_keyword

Derived columns that are not mapped attributes (e.g. a correlated count)
are supplied per query through ``extra_columns``.

Invariants enforced:
    - Sort and filter fields are restricted to the declared keys.
    - Filter roles are folded left in ``index`` order; each role after the
      first joins the accumulated expression with its own and/or condition.
    - page_size never exceeds ListingLimits.max_page_size.

Failure modes:
    - InvalidSortColumnError, InvalidFilterFieldError,
      InvalidFilterComparatorError, MalformedFilterError.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sqlalchemy import String, and_, func, not_, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import ColumnElement, Select

from ledger_kernel.exceptions import (
    InvalidFilterComparatorError,
    InvalidFilterFieldError,
    InvalidSortColumnError,
    MalformedFilterError,
)
from ledger_kernel.logging_config import get_logger

logger = get_logger("selectors.dynamic_list")


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class FilterCondition(str, Enum):
    AND = "and"
    OR = "or"


class FilterComparator(str, Enum):
    EQUALS = "equals"
    NOT_EQUAL = "not_equal"
    CONTAIN = "contain"
    NOT_CONTAIN = "not_contain"
    BIGGER_THAN = "bigger_than"
    BIGGER_OR_EQUAL = "bigger_or_equal"
    SMALLER_THAN = "smaller_than"
    SMALLER_OR_EQUAL = "smaller_or_equal"
    EMPTY = "empty"
    NOT_EMPTY = "not_empty"


_VALUELESS = frozenset({FilterComparator.EMPTY, FilterComparator.NOT_EMPTY})


@dataclass(frozen=True)
class FilterRole:
    """One filter predicate of a list request."""

    field_key: str
    comparator: FilterComparator
    value: Any = None
    condition: FilterCondition = FilterCondition.AND
    index: int = 0


@dataclass(frozen=True)
class ListFilter:
    """Sorting, search, filtering and pagination for a list request."""

    column_sort_by: str | None = None
    sort_order: SortOrder = SortOrder.ASC
    search_keyword: str | None = None
    filter_roles: tuple[FilterRole, ...] = ()
    page: int = 1
    page_size: int | None = None

    def __post_init__(self) -> None:
        if isinstance(self.page, bool) or not isinstance(self.page, int) or self.page < 1:
            raise MalformedFilterError("page must be an integer >= 1")
        if self.page_size is not None and (
            isinstance(self.page_size, bool)
            or not isinstance(self.page_size, int)
            or self.page_size < 1
        ):
            raise MalformedFilterError("page_size must be an integer >= 1")


@dataclass(frozen=True)
class FilterMeta:
    """Echo of the applied filter plus the total row count."""

    sort_order: SortOrder
    column_sort_by: str | None
    search_keyword: str | None
    page: int
    page_size: int
    total: int


@dataclass(frozen=True)
class ListingLimits:
    """Pagination bounds, normally built from configuration."""

    default_page_size: int = 12
    max_page_size: int = 100

    def __post_init__(self) -> None:
        if self.default_page_size < 1 or self.max_page_size < 1:
            raise ValueError("page sizes must be positive")
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size exceeds max_page_size")


def _positive_int(value: Any, name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise MalformedFilterError(f"{name} must be an integer") from exc
    if number < 1:
        raise MalformedFilterError(f"{name} must be >= 1")
    return number


def _parse_enum(enum_cls: type[Enum], value: Any, error: Exception) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        raise error from None


def parse_filter_role(raw: Mapping[str, Any], position: int = 0) -> FilterRole:
    """Build a FilterRole from a plain mapping."""
    if not isinstance(raw, Mapping):
        raise MalformedFilterError(f"filter role {position} must be an object")
    field_key = raw.get("field_key")
    if not field_key:
        raise MalformedFilterError(f"filter role {position} has no field_key")
    comparator = _parse_enum(
        FilterComparator,
        raw.get("comparator", ""),
        InvalidFilterComparatorError(str(raw.get("comparator"))),
    )
    condition = _parse_enum(
        FilterCondition,
        raw.get("condition") or FilterCondition.AND.value,
        MalformedFilterError(f"filter role {position} has unknown condition"),
    )
    value = raw.get("value")
    if comparator not in _VALUELESS and value is None:
        raise MalformedFilterError(f"filter role {position} requires a value")
    index = raw.get("index", position)
    try:
        index = int(index)
    except (TypeError, ValueError) as exc:
        raise MalformedFilterError(f"filter role {position} has non-integer index") from exc
    return FilterRole(
        field_key=str(field_key),
        comparator=comparator,
        value=value,
        condition=condition,
        index=index,
    )


def parse_list_filter(dto: Mapping[str, Any] | None) -> ListFilter:
    """
    Build a ListFilter from request arguments.

    Accepted keys: column_sort_by, sort_order, search_keyword, filter_roles
    (list of mappings), stringified_filter_roles (JSON-encoded list of
    mappings), page, page_size.  Stringified roles take precedence when both
    are supplied.
    """
    dto = dict(dto or {})

    raw_roles: Any = dto.get("filter_roles") or []
    stringified = dto.get("stringified_filter_roles")
    if stringified:
        try:
            raw_roles = json.loads(stringified)
        except (TypeError, ValueError) as exc:
            raise MalformedFilterError("stringified_filter_roles is not valid JSON") from exc
    if not isinstance(raw_roles, (list, tuple)):
        raise MalformedFilterError("filter roles must be a list")

    sort_order = _parse_enum(
        SortOrder,
        dto.get("sort_order") or SortOrder.ASC.value,
        MalformedFilterError("sort_order must be asc or desc"),
    )

    page_size = dto.get("page_size")
    keyword = dto.get("search_keyword")
    keyword = str(keyword).strip() if keyword is not None else None

    return ListFilter(
        column_sort_by=dto.get("column_sort_by") or None,
        sort_order=sort_order,
        search_keyword=keyword or None,
        filter_roles=tuple(
            parse_filter_role(raw, position) for position, raw in enumerate(raw_roles)
        ),
        page=_positive_int(dto.get("page", 1), "page"),
        page_size=_positive_int(page_size, "page_size") if page_size is not None else None,
    )


class DynamicList:
    """
    Applies a ListFilter to a tenant-scoped select over a listable model.

    Usage:
        dynamic = DynamicList(ItemCategoryModel, list_filter, extra_columns={"count": count_col})
        dynamic.validate()
        rows, meta = dynamic.fetch(session, base_query)
    """

    def __init__(
        self,
        model: type,
        list_filter: ListFilter | None = None,
        limits: ListingLimits | None = None,
        extra_columns: Mapping[str, ColumnElement] | None = None,
    ):
        self.model = model
        self.list_filter = list_filter or ListFilter()
        self.limits = limits or ListingLimits()
        self._columns: dict[str, ColumnElement] = {
            key: getattr(model, attr) for key, attr in getattr(model, "LIST_FIELDS", {}).items()
        }
        self._sortable: dict[str, ColumnElement] = dict(self._columns)
        self._sortable.update(extra_columns or {})
        self._search_columns: tuple[ColumnElement, ...] = tuple(
            self._search_column(key) for key in getattr(model, "SEARCH_FIELDS", ())
        )

    def _search_column(self, key: str) -> ColumnElement:
        # Search fields need not be listable; they may name any mapped attribute.
        if key in self._columns:
            return self._columns[key]
        column = getattr(self.model, key, None)
        if column is None:
            raise ValueError(
                f"{self.model.__name__}.SEARCH_FIELDS names unknown attribute {key!r}"
            )
        return column

    @property
    def page_size(self) -> int:
        requested = self.list_filter.page_size or self.limits.default_page_size
        return min(requested, self.limits.max_page_size)

    def validate(self) -> None:
        """Reject unknown sort columns and filter fields before querying."""
        sort_by = self.list_filter.column_sort_by
        if sort_by is not None and sort_by not in self._sortable:
            raise InvalidSortColumnError(sort_by)
        for role in self.list_filter.filter_roles:
            if role.field_key not in self._sortable:
                raise InvalidFilterFieldError(role.field_key)

    def _role_expression(self, role: FilterRole) -> ColumnElement[bool]:
        column = self._sortable[role.field_key]
        value = role.value
        comparator = role.comparator
        if comparator == FilterComparator.EQUALS:
            return column == value
        if comparator == FilterComparator.NOT_EQUAL:
            return column != value
        if comparator == FilterComparator.CONTAIN:
            return column.icontains(str(value), autoescape=True)
        if comparator == FilterComparator.NOT_CONTAIN:
            return not_(column.icontains(str(value), autoescape=True))
        if comparator == FilterComparator.BIGGER_THAN:
            return column > value
        if comparator == FilterComparator.BIGGER_OR_EQUAL:
            return column >= value
        if comparator == FilterComparator.SMALLER_THAN:
            return column < value
        if comparator == FilterComparator.SMALLER_OR_EQUAL:
            return column <= value

        is_empty = column.is_(None)
        if isinstance(column.type, String):
            is_empty = or_(is_empty, column == "")
        if comparator == FilterComparator.EMPTY:
            return is_empty
        if comparator == FilterComparator.NOT_EMPTY:
            return not_(is_empty)
        raise InvalidFilterComparatorError(str(comparator))

    def filter_expression(self) -> ColumnElement[bool] | None:
        """Fold filter roles left, in index order, into one expression."""
        roles = sorted(self.list_filter.filter_roles, key=lambda r: r.index)
        expression: ColumnElement[bool] | None = None
        for role in roles:
            current = self._role_expression(role)
            if expression is None:
                expression = current
            elif role.condition == FilterCondition.OR:
                expression = or_(expression, current)
            else:
                expression = and_(expression, current)
        return expression

    def search_expression(self) -> ColumnElement[bool] | None:
        keyword = self.list_filter.search_keyword
        if not keyword or not self._search_columns:
            return None
        return or_(
            *(column.icontains(keyword, autoescape=True) for column in self._search_columns)
        )

    def apply(self, query: Select) -> Select:
        """Add search, filter and ordering clauses (no pagination)."""
        self.validate()
        search = self.search_expression()
        if search is not None:
            query = query.where(search)
        roles = self.filter_expression()
        if roles is not None:
            query = query.where(roles)

        sort_by = self.list_filter.column_sort_by
        if sort_by is not None:
            column = self._sortable[sort_by]
            query = query.order_by(
                column.desc() if self.list_filter.sort_order == SortOrder.DESC else column.asc()
            )
        # Stable page boundaries
        return query.order_by(self.model.id)

    def paginate(self, query: Select) -> Select:
        return query.limit(self.page_size).offset((self.list_filter.page - 1) * self.page_size)

    def count(self, session: Session, query: Select) -> int:
        """Total rows matching the filtered query, ignoring pagination."""
        counted = select(func.count()).select_from(query.order_by(None).subquery())
        return session.execute(counted).scalar_one()

    def meta(self, total: int) -> FilterMeta:
        return FilterMeta(
            sort_order=self.list_filter.sort_order,
            column_sort_by=self.list_filter.column_sort_by,
            search_keyword=self.list_filter.search_keyword,
            page=self.list_filter.page,
            page_size=self.page_size,
            total=total,
        )

    def fetch(self, session: Session, query: Select) -> tuple[list[Any], FilterMeta]:
        """Apply the filter, count the matches and return one page of rows."""
        filtered = self.apply(query)
        total = self.count(session, filtered)
        rows = list(session.execute(self.paginate(filtered)).all())
        logger.debug(
            "dynamic_list_fetched",
            extra={
                "model": self.model.__name__,
                "total": total,
                "page": self.list_filter.page,
                "page_size": self.page_size,
                "filter_roles": len(self.list_filter.filter_roles),
            },
        )
        return rows, self.meta(total)
