from typing import List, Optional

import models_pydantic as schemas
from executor import QueryExecutor
from query_builder import build_property_search

# Insert order for add_property; also the order of its $1..$14 placeholders.
PROPERTY_INSERT_COLUMNS = (
    "owner_id",
    "title",
    "description",
    "thumbnail_photo_url",
    "cover_photo_url",
    "cost_per_night",
    "street",
    "city",
    "province",
    "post_code",
    "country",
    "parking_spaces",
    "number_of_bathrooms",
    "number_of_bedrooms",
)

_RESERVATION_PROPERTY_COLUMNS = ", ".join(
    f"properties.{column}" for column in PROPERTY_INSERT_COLUMNS
)


class QueryService:
    """Users, reservations and properties, one statement per call."""

    def __init__(self, executor: QueryExecutor, default_limit: int = 10):
        self.executor = executor
        self.default_limit = default_limit

    # ---------- Users ----------
    def get_user_with_email(self, email: str) -> Optional[schemas.User]:
        rows = self.executor.execute(
            "SELECT * FROM users WHERE email = $1",
            [email],
        )
        return schemas.User.model_validate(rows[0]) if rows else None

    def get_user_with_id(self, user_id: int) -> Optional[schemas.User]:
        rows = self.executor.execute(
            "SELECT * FROM users WHERE id = $1",
            [user_id],
        )
        return schemas.User.model_validate(rows[0]) if rows else None

    def add_user(self, user: schemas.UserCreate) -> schemas.User:
        rows = self.executor.execute(
            """
            INSERT INTO users (name, email, password)
            VALUES ($1, $2, $3)
            RETURNING *
            """,
            [user.name, user.email, user.password],
            write=True,
        )
        return schemas.User.model_validate(rows[0])

    # ---------- Reservations ----------
    def get_all_reservations(self, guest_id: int, limit: Optional[int] = None) -> List[schemas.ReservationListing]:
        """Past reservations of a guest, earliest first."""
        rows = self.executor.execute(
            f"""
            SELECT reservations.id, reservations.guest_id, reservations.property_id,
                   reservations.start_date, reservations.end_date,
                   {_RESERVATION_PROPERTY_COLUMNS},
                   AVG(property_reviews.rating) AS average_rating
            FROM reservations
            JOIN properties ON reservations.property_id = properties.id
            LEFT JOIN property_reviews ON properties.id = property_reviews.property_id
            WHERE reservations.guest_id = $1 AND reservations.end_date < CURRENT_DATE
            GROUP BY reservations.id, properties.id
            ORDER BY reservations.start_date
            LIMIT $2
            """,
            [guest_id, self.default_limit if limit is None else limit],
        )
        return [schemas.ReservationListing.model_validate(row) for row in rows]

    # ---------- Properties ----------
    def get_all_properties(self, options: Optional[schemas.SearchOptions] = None,
                           limit: Optional[int] = None) -> List[schemas.PropertyListing]:
        statement = build_property_search(options, self.default_limit if limit is None else limit)
        rows = self.executor.execute(statement.text, statement.params)
        return [schemas.PropertyListing.model_validate(row) for row in rows]

    def add_property(self, prop: schemas.PropertyCreate) -> schemas.Property:
        columns = ", ".join(PROPERTY_INSERT_COLUMNS)
        placeholders = ", ".join(f"${i}" for i in range(1, len(PROPERTY_INSERT_COLUMNS) + 1))
        values = [getattr(prop, column) for column in PROPERTY_INSERT_COLUMNS]
        rows = self.executor.execute(
            f"""
            INSERT INTO properties ({columns})
            VALUES ({placeholders})
            RETURNING *
            """,
            values,
            write=True,
        )
        return schemas.Property.model_validate(rows[0])
