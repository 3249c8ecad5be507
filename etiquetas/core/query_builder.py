"""
Filter and pagination builder shared by the listing endpoints.

Predicates are accumulated together with their parameter and rendered as a
WHERE fragment with numbered bind placeholders (:p1, :p2, ...). The count and
page statements reuse the same fragment; LIMIT and OFFSET are always the last
two parameters. Values never end up inside the SQL text.
"""

import math
from collections.abc import Iterable
from typing import Any

from etiquetas.core.config import settings
from etiquetas.core.exceptions import ValidationError

TRUE_STRINGS = frozenset({"true", "1", "yes", "si", "sí"})
FALSE_STRINGS = frozenset({"false", "0", "no"})

LIKE_ESCAPE_CHAR = "\\"

# Largest OFFSET a signed 64-bit store integer can hold.
MAX_OFFSET = 2**63 - 1


def coerce_bool(value: bool | str) -> bool:
    """Coerce a boolean filter that may arrive as the text "true"/"false"."""
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in TRUE_STRINGS:
        return True
    if normalized in FALSE_STRINGS:
        return False
    raise ValidationError(f"Valor booleano inválido: {value!r}")


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the search term matches literally."""
    return (
        term.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", LIKE_ESCAPE_CHAR + "%")
        .replace("_", LIKE_ESCAPE_CHAR + "_")
    )


class FilterQuery:
    """Accumulates (predicate, parameter) pairs plus page/limit for one listing request."""

    def __init__(
        self,
        page: int | None = None,
        limit: int | None = None,
        max_limit: int | None = None,
    ) -> None:
        page = 1 if page is None else page
        limit = settings.PAGINATION_DEFAULT_LIMIT if limit is None else limit
        if page < 1:
            raise ValidationError("El parámetro 'page' debe ser mayor o igual a 1")
        if limit < 1:
            raise ValidationError("El parámetro 'limit' debe ser mayor o igual a 1")
        self.page = page
        self.limit = min(limit, max_limit or settings.PAGINATION_MAX_LIMIT)
        if (page - 1) * self.limit > MAX_OFFSET:
            raise ValidationError("El parámetro 'page' está fuera de rango")
        self._predicates: list[str] = []
        self._params: list[Any] = []

    def _placeholder(self, index: int) -> str:
        return f"p{index}"

    def add(self, predicate: str, value: Any) -> "FilterQuery":
        """
        Add a predicate; every "{param}" in it is bound to value.

        Example: add("categoria = {param}", "crocs") -> "categoria = :p1".
        """
        self._params.append(value)
        name = self._placeholder(len(self._params))
        self._predicates.append(predicate.replace("{param}", f":{name}"))
        return self

    def equals(self, column: str, value: Any) -> "FilterQuery":
        """Exact match; skipped when value is None or an empty string."""
        if value is None or value == "":
            return self
        return self.add(f"{column} = {{param}}", value)

    def flag(self, column: str, value: bool | str | None) -> "FilterQuery":
        """Boolean match; string values are coerced, None is skipped."""
        if value is None or value == "":
            return self
        return self.add(f"{column} = {{param}}", coerce_bool(value))

    def search(self, columns: Iterable[str], term: str | None) -> "FilterQuery":
        """Case-insensitive substring match OR-ed across columns; skipped when blank."""
        if term is None or not term.strip():
            return self
        matches = [
            f"LOWER({column}) LIKE {{param}} ESCAPE '{LIKE_ESCAPE_CHAR}'"
            for column in columns
        ]
        return self.add(
            "(" + " OR ".join(matches) + ")",
            f"%{escape_like(term.strip().lower())}%",
        )

    @property
    def where_clause(self) -> str:
        if not self._predicates:
            return ""
        return "WHERE " + " AND ".join(self._predicates)

    @property
    def params(self) -> list[Any]:
        """Filter parameters in placeholder order."""
        return list(self._params)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def page_params(self) -> list[Any]:
        """Filter parameters followed by limit and offset."""
        return [*self._params, self.limit, self.offset]

    def bind_params(self, paginated: bool = False) -> dict[str, Any]:
        """Parameters keyed by placeholder name, ready for sqlalchemy.text()."""
        values = self.page_params if paginated else self._params
        return {self._placeholder(i): v for i, v in enumerate(values, start=1)}

    def count_sql(self, from_clause: str) -> str:
        return f"SELECT COUNT(*) AS total FROM {from_clause} {self.where_clause}".rstrip()

    def page_sql(self, select_clause: str, order_by: str = "created_at DESC, id DESC") -> str:
        limit_name = self._placeholder(len(self._params) + 1)
        offset_name = self._placeholder(len(self._params) + 2)
        parts = [select_clause]
        if self._predicates:
            parts.append(self.where_clause)
        parts.append(f"ORDER BY {order_by}")
        parts.append(f"LIMIT :{limit_name} OFFSET :{offset_name}")
        return " ".join(parts)

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)

    def pagination(self, total: int) -> dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": total,
            "totalPages": self.total_pages(total),
        }
