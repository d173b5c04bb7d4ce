import re

import pytest
from pydantic import ValidationError

from executor import to_named_binds
from models_pydantic import SearchOptions
from query_builder import Predicate, build_property_search, dollars_to_cents

PLACEHOLDER = re.compile(r"\$(\d+)")

def placeholders(statement):
    return [int(n) for n in PLACEHOLDER.findall(statement.text)]

# ---------- SHAPE OF THE STATEMENT ----------

def test_no_options_has_no_where_or_having():
    stmt = build_property_search(None, 5)
    assert "WHERE" not in stmt.text
    assert "HAVING" not in stmt.text
    assert stmt.params == [5]
    assert stmt.text.rstrip().endswith("LIMIT $1")

def test_empty_options_same_as_none():
    assert build_property_search(SearchOptions(), 10) == build_property_search(None, 10)

def test_city_uses_substring_match():
    stmt = build_property_search(SearchOptions(city="Van"), 10)
    assert "WHERE properties.city LIKE $1" in stmt.text
    assert stmt.params == ["%Van%", 10]

def test_prices_are_converted_to_cents():
    stmt = build_property_search(
        SearchOptions(minimum_price_per_night=50, maximum_price_per_night=150), 10
    )
    assert "properties.cost_per_night >= $1 AND properties.cost_per_night <= $2" in stmt.text
    assert stmt.params == [5000, 15000, 10]

def test_fractional_dollars_round_to_whole_cents():
    assert dollars_to_cents(19.99) == 1999
    assert dollars_to_cents("42.5") == 4250

def test_predicates_follow_fixed_order():
    stmt = build_property_search(
        SearchOptions(minimum_rating=4, maximum_price_per_night=200, city="Toronto",
                      minimum_price_per_night=100),
        3,
    )
    where = stmt.text.index("WHERE")
    city = stmt.text.index("properties.city")
    low = stmt.text.index("cost_per_night >=")
    high = stmt.text.index("cost_per_night <=")
    having = stmt.text.index("HAVING")
    assert where < city < low < high < having
    assert stmt.params == ["%Toronto%", 10000, 20000, 4.0, 3]

# ---------- MINIMUM RATING ----------

def test_minimum_rating_only_goes_to_having():
    stmt = build_property_search(SearchOptions(minimum_rating=4), 10)
    assert "WHERE" not in stmt.text
    assert "property_reviews.rating >=" not in stmt.text
    assert "HAVING AVG(property_reviews.rating) >= $1" in stmt.text
    assert stmt.params == [4.0, 10]

def test_having_binds_rating_not_limit():
    stmt = build_property_search(SearchOptions(city="Van", minimum_rating=3.5), 20)
    having_ref = int(re.search(r"HAVING .* \$(\d+)", stmt.text).group(1))
    assert stmt.params[having_ref - 1] == 3.5
    assert stmt.params[-1] == 20
    assert stmt.text.rstrip().endswith(f"LIMIT ${len(stmt.params)}")

def test_group_by_comes_between_where_and_having():
    stmt = build_property_search(SearchOptions(city="Van", minimum_rating=3), 10)
    assert stmt.text.index("WHERE") < stmt.text.index("GROUP BY properties.id") < stmt.text.index("HAVING")
    assert stmt.text.index("HAVING") < stmt.text.index("ORDER BY properties.cost_per_night")

# ---------- PARAMETER COUNT ----------

@pytest.mark.parametrize("options,predicates", [
    ({}, 0),
    ({"city": "Van"}, 1),
    ({"minimum_price_per_night": 10}, 1),
    ({"city": "Van", "maximum_price_per_night": 100}, 2),
    ({"minimum_price_per_night": 10, "maximum_price_per_night": 100, "minimum_rating": 2}, 3),
    ({"city": "Van", "minimum_price_per_night": 10, "maximum_price_per_night": 100,
      "minimum_rating": 2}, 4),
])
def test_every_placeholder_has_a_value(options, predicates):
    stmt = build_property_search(SearchOptions(**options), 10)
    assert len(stmt.params) == predicates + 1
    assert sorted(placeholders(stmt)) == list(range(1, len(stmt.params) + 1))
    # and the executor accepts the pairing
    to_named_binds(stmt.text, stmt.params)

# ---------- EDGE CASES ----------

def test_blank_form_fields_are_ignored():
    options = SearchOptions(city="", minimum_price_per_night="", maximum_price_per_night="  ",
                            minimum_rating="")
    assert build_property_search(options, 10).params == [10]

@pytest.mark.parametrize("field", ["minimum_price_per_night", "maximum_price_per_night", "minimum_rating"])
@pytest.mark.parametrize("value", [float("nan"), float("inf"), "-inf"])
def test_non_finite_numbers_are_rejected(field, value):
    with pytest.raises(ValidationError):
        SearchOptions(**{field: value})

def test_zero_price_is_still_a_filter():
    stmt = build_property_search(SearchOptions(minimum_price_per_night=0), 10)
    assert stmt.params == [0, 10]

def test_predicate_renders_its_position():
    assert Predicate("properties.city", "LIKE", "%a%").render(3) == "properties.city LIKE $3"

def test_named_binds_rewrite():
    sql, binds = to_named_binds("SELECT * FROM t WHERE a = $1 AND b = $10", list(range(1, 11)))
    assert sql == "SELECT * FROM t WHERE a = :p1 AND b = :p10"
    assert binds["p1"] == 1
    assert binds["p10"] == 10

def test_named_binds_reject_missing_value():
    with pytest.raises(ValueError):
        to_named_binds("SELECT * FROM t WHERE a = $2", ["only one"])
