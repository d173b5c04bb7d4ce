"""Builds the property search statement from optional filters.

Filters become ``Predicate`` objects collected in order. Placeholder numbers are
assigned only when the statement is rendered, by walking the final parameter
list, so the n-th ``$n`` always binds the n-th value and the limit comes last.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from models_pydantic import SearchOptions

PROPERTY_LISTING_SELECT = """
SELECT properties.*, AVG(property_reviews.rating) AS average_rating
FROM properties
LEFT JOIN property_reviews ON properties.id = property_reviews.property_id
""".strip()


@dataclass(frozen=True)
class Predicate:
    column: str
    operator: str
    value: Any

    def render(self, position: int) -> str:
        return f"{self.column} {self.operator} ${position}"


@dataclass(frozen=True)
class Statement:
    text: str
    params: List[Any] = field(default_factory=list)


def dollars_to_cents(amount: float) -> int:
    return int(round(float(amount) * 100))


def search_predicates(options: Optional[SearchOptions]):
    """Split the filters into (WHERE predicates, HAVING predicates)."""
    where: List[Predicate] = []
    having: List[Predicate] = []
    if options is None:
        return where, having

    if options.city is not None:
        where.append(Predicate("properties.city", "LIKE", f"%{options.city}%"))
    if options.minimum_price_per_night is not None:
        where.append(Predicate("properties.cost_per_night", ">=",
                               dollars_to_cents(options.minimum_price_per_night)))
    if options.maximum_price_per_night is not None:
        where.append(Predicate("properties.cost_per_night", "<=",
                               dollars_to_cents(options.maximum_price_per_night)))
    if options.minimum_rating is not None:
        having.append(Predicate("AVG(property_reviews.rating)", ">=",
                                float(options.minimum_rating)))
    return where, having


def build_property_search(options: Optional[SearchOptions] = None, limit: int = 10) -> Statement:
    where, having = search_predicates(options)
    params: List[Any] = []

    def bind(predicates: List[Predicate]) -> str:
        rendered = []
        for predicate in predicates:
            params.append(predicate.value)
            rendered.append(predicate.render(len(params)))
        return " AND ".join(rendered)

    parts = [PROPERTY_LISTING_SELECT]
    if where:
        parts.append("WHERE " + bind(where))
    parts.append("GROUP BY properties.id")
    if having:
        parts.append("HAVING " + bind(having))
    params.append(limit)
    parts.append("ORDER BY properties.cost_per_night")
    parts.append(f"LIMIT ${len(params)}")

    return Statement(text="\n".join(parts), params=params)
