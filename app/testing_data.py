import models_sqlalchemy as models
import models_pydantic as schemas

# ---------- TEST DATA HELPERS ----------

def create_user_dict(name="Alice", email="alice@example.com", password="password"):
    return {"name": name, "email": email, "password": password}

def create_property_dict(owner_id, title="Cozy Cabin", city="Vancouver", cost_per_night=10000):
    return {
        "owner_id": owner_id,
        "title": title,
        "description": "description",
        "thumbnail_photo_url": "https://images.example.com/thumb.jpg",
        "cover_photo_url": "https://images.example.com/cover.jpg",
        "cost_per_night": cost_per_night,
        "street": "123 Main St",
        "city": city,
        "province": "BC",
        "post_code": "V5K 0A1",
        "country": "Canada",
        "parking_spaces": 1,
        "number_of_bathrooms": 1,
        "number_of_bedrooms": 2,
    }

def add_user(service, **kwargs):
    return service.add_user(schemas.UserCreate(**create_user_dict(**kwargs)))

def add_property(service, owner_id, **kwargs):
    return service.add_property(schemas.PropertyCreate(**create_property_dict(owner_id, **kwargs)))

def add_reservation(session, guest_id, property_id, start_date, end_date):
    reservation = models.Reservation(
        guest_id=guest_id,
        property_id=property_id,
        start_date=start_date,
        end_date=end_date,
    )
    session.add(reservation)
    session.commit()
    return reservation

def add_review(session, guest_id, property_id, reservation_id, rating, message=None):
    review = models.PropertyReview(
        guest_id=guest_id,
        property_id=property_id,
        reservation_id=reservation_id,
        rating=rating,
        message=message,
    )
    session.add(review)
    session.commit()
    return review
