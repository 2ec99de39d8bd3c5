"""Dynamic SQL condition building utilities.

Every helper in this module appends SQL text and bound values in the same
step and draws placeholder numbers from one shared :class:`ParamIndex`,
so ``$N`` in the emitted SQL always lines up with ``params[N - 1]``.
"""

from typing import Any, Iterable, List, NamedTuple, Optional, Sequence

from stockroom.services.listings.utils.date_range import parse_bound

COMPARISON_OPERATORS = ('=', '<>', '>=', '<=', '>', '<')


class ParamIndex:
    """Mutable placeholder counter shared by every helper within one build call."""

    __slots__ = ('value',)

    def __init__(self, start: int = 1):
        self.value = start

    def take(self) -> int:
        """Return the next placeholder number and advance by one."""
        idx = self.value
        self.value += 1
        return idx

    def __repr__(self) -> str:
        return f"ParamIndex({self.value})"


class WhereClause(NamedTuple):
    """A joined WHERE predicate (without the keyword) and its bound values."""
    where_clause: str
    params: List[Any]


def is_blank(value: Any) -> bool:
    """True for ``None`` and whitespace-only strings."""
    return value is None or (isinstance(value, str) and not value.strip())


def normalize_keyword(value: Any) -> Optional[str]:
    """Trim, collapse internal whitespace and wrap in ``%`` wildcards."""
    if is_blank(value):
        return None
    collapsed = ' '.join(str(value).split())
    return f"%{collapsed}%"


def apply_date_range_condition(
    conditions: List[str],
    params: List[Any],
    column: str,
    after: Any,
    before: Any,
    param_index: ParamIndex,
) -> None:
    """Append ``column >= $N`` and/or ``column < $M`` for the given bounds.

    ``before`` is exclusive; pair it with
    :func:`~stockroom.services.listings.utils.date_range.normalize_date_range`
    so a date-only upper bound covers its whole day. Bounds that do not
    parse as dates are treated as absent.
    """
    after_bound = parse_bound(after)
    before_bound = parse_bound(before)

    if after_bound is not None:
        conditions.append(f"{column} >= ${param_index.take()}")
        params.append(after_bound)

    if before_bound is not None:
        conditions.append(f"{column} < ${param_index.take()}")
        params.append(before_bound)


class ConditionBuilder:
    """Build parameterized SQL WHERE clauses dynamically.

    Usage:
        builder = ConditionBuilder()
        builder.add('b.status_id', filters.status_id)
        builder.add_in('b.sku_id', filters.sku_ids)
        builder.add_keyword(['b.name', 'b.code'], filters.keyword)

        where_clause, params = builder.build()
        rows = await conn.fetch(f"SELECT * FROM boms b WHERE {where_clause}", *params)

    Column and table expressions are interpolated verbatim and must come
    from code, never from request input. Values are always bound.
    """

    def __init__(
        self,
        start_idx: int = 1,
        seed: Optional[str] = '1=1',
        param_index: Optional[ParamIndex] = None,
    ):
        """Initialize ConditionBuilder.

        Args:
            start_idx: Starting parameter index (default $1).
            seed: Neutral first condition so the list always joins cleanly.
            param_index: Counter shared with another builder; overrides ``start_idx``.
        """
        self.conditions: List[str] = [seed] if seed else []
        self.params: List[Any] = []
        self.param_index = param_index if param_index is not None else ParamIndex(start_idx)
        self._start_idx = self.param_index.value

    def _bind(self, value: Any) -> str:
        self.params.append(value)
        return f"${self.param_index.take()}"

    def add(self, column: str, value: Any, operator: str = '=') -> 'ConditionBuilder':
        """Add ``column <operator> $N``; ``None`` and blank strings are skipped.

        Booleans are always applied, so ``False`` filters rather than being
        mistaken for "not provided".
        """
        if is_blank(value):
            return self
        if operator not in COMPARISON_OPERATORS:
            raise ValueError(f"Unsupported comparison operator: {operator!r}")
        if isinstance(value, str):
            value = value.strip()
        self.conditions.append(f"{column} {operator} {self._bind(value)}")
        return self

    def add_compare(self, column: str, operator: str, value: Any) -> 'ConditionBuilder':
        """Add a range comparison such as ``b.revision >= $N``."""
        return self.add(column, value, operator=operator)

    def add_in(self, column: str, values: Optional[Iterable[Any]]) -> 'ConditionBuilder':
        """Add ``column IN ($a, $b, ...)`` with one placeholder per value."""
        if values is None:
            return self
        kept = [v for v in values if not is_blank(v)]
        if not kept:
            return self
        placeholders = ', '.join(self._bind(v) for v in kept)
        self.conditions.append(f"{column} IN ({placeholders})")
        return self

    def add_one_or_many(self, column: str, value: Any) -> 'ConditionBuilder':
        """Equality for a scalar, ``IN`` for a list."""
        if isinstance(value, (list, tuple)):
            return self.add_in(column, value)
        return self.add(column, value)

    def add_any(self, column: str, values: Optional[Sequence[Any]], cast: Optional[str] = None) -> 'ConditionBuilder':
        """Add ``column = ANY($N[::cast])`` binding the whole list as one array value."""
        if not values:
            return self
        suffix = f"::{cast}" if cast else ''
        self.conditions.append(f"{column} = ANY({self._bind(list(values))}{suffix})")
        return self

    def add_ilike(self, column: str, value: Any) -> 'ConditionBuilder':
        """Add a case-insensitive partial match ``column ILIKE '%value%'``."""
        if is_blank(value):
            return self
        self.conditions.append(f"{column} ILIKE {self._bind(f'%{str(value).strip()}%')}")
        return self

    def add_keyword(self, columns: Sequence[str], value: Any) -> 'ConditionBuilder':
        """Add one grouped ``(a ILIKE $N OR b ILIKE $N ...)`` bound to a single value.

        An empty ``columns`` list means no column may be searched; the
        builder then fails closed with ``1 = 0``.
        """
        keyword = normalize_keyword(value)
        if keyword is None:
            return self
        if not columns:
            self.conditions.append('1 = 0')
            return self
        placeholder = self._bind(keyword)
        self.conditions.append('(' + ' OR '.join(f"{col} ILIKE {placeholder}" for col in columns) + ')')
        return self

    def add_raw(self, condition: str) -> 'ConditionBuilder':
        """Add a parameterless condition such as ``p.valid_from <= NOW()``."""
        self.conditions.append(condition)
        return self

    def add_template(self, template: str, value: Any) -> 'ConditionBuilder':
        """Bind ``value`` once and substitute its placeholder for every ``{p}`` in ``template``."""
        if is_blank(value):
            return self
        self.conditions.append(template.format(p=self._bind(value)))
        return self

    def extend(self, conditions: Sequence[str], params: Sequence[Any]) -> 'ConditionBuilder':
        """Merge conditions and values produced against this builder's ``param_index``."""
        self.conditions.extend(conditions)
        self.params.extend(params)
        return self

    def add_date_range(self, column: str, after: Any = None, before: Any = None) -> 'ConditionBuilder':
        """Add a half-open ``[after, before)`` range on ``column``."""
        apply_date_range_condition(self.conditions, self.params, column, after, before, self.param_index)
        return self

    @property
    def where_clause(self) -> str:
        """Get the WHERE clause string (without 'WHERE' keyword)."""
        return " AND ".join(self.conditions) if self.conditions else "TRUE"

    @property
    def next_param_idx(self) -> int:
        """Get the next available parameter index."""
        return self.param_index.value

    def build(self) -> WhereClause:
        """Return the finished clause, checking placeholders and values still line up."""
        expected = self.param_index.value - self._start_idx
        if expected != len(self.params):
            raise RuntimeError(
                f"Placeholder count {expected} does not match {len(self.params)} bound values"
            )
        return WhereClause(self.where_clause, list(self.params))
