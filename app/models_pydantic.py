from typing import Optional
from datetime import date
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

class UserBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr

class UserCreate(UserBase):
    password: str = Field(..., min_length=1, max_length=255)

class User(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    password: str

class UserResponse(UserBase):
    id: int

class PropertyBase(BaseModel):
    owner_id: int
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    thumbnail_photo_url: str = Field(..., max_length=255)
    cover_photo_url: str = Field(..., max_length=255)
    cost_per_night: int = Field(..., ge=0)  # cents
    street: str = Field(..., max_length=255)
    city: str = Field(..., min_length=1, max_length=255)
    province: str = Field(..., max_length=255)
    post_code: str = Field(..., max_length=255)
    country: str = Field(..., max_length=255)
    parking_spaces: int = Field(0, ge=0)
    number_of_bathrooms: int = Field(0, ge=0)
    number_of_bedrooms: int = Field(0, ge=0)

class PropertyCreate(PropertyBase):
    pass

class Property(PropertyBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    active: bool = True

class PropertyListing(Property):
    average_rating: Optional[float] = None

class ReservationListing(BaseModel):
    """A past reservation joined with the property it was made on."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    guest_id: int
    property_id: int
    start_date: date
    end_date: date
    owner_id: int
    title: str
    description: Optional[str] = None
    thumbnail_photo_url: str
    cover_photo_url: str
    cost_per_night: int
    street: str
    city: str
    province: str
    post_code: str
    country: str
    parking_spaces: int
    number_of_bathrooms: int
    number_of_bedrooms: int
    average_rating: Optional[float] = None

class SearchOptions(BaseModel):
    """Optional property search filters. Prices are in dollars, not cents."""
    city: Optional[str] = None
    minimum_price_per_night: Optional[float] = Field(None, allow_inf_nan=False)
    maximum_price_per_night: Optional[float] = Field(None, allow_inf_nan=False)
    minimum_rating: Optional[float] = Field(None, allow_inf_nan=False)

    # HTML forms submit untouched fields as ""
    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and v.strip() == "":
            return None
        return v
