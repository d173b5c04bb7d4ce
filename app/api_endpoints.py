import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Depends, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

import models_pydantic as schemas
from config import configure_logging, load_config
from errors import ConstraintViolationError
from executor import create_executor
from query_service import QueryService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg = load_config()
    configure_logging(cfg.log_level)
    executor = create_executor(cfg)
    if not executor.check_connection():
        logger.warning("Starting without a reachable database at %s", cfg.database_url)
    app.state.query_service = QueryService(executor, default_limit=cfg.default_result_limit)
    yield
    executor.dispose()


app = FastAPI(title="LightBnB API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Or specify your frontend URL
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Dependency to get the shared query service
def get_query_service(request: Request) -> QueryService:
    return request.app.state.query_service

# Query params arrive as raw strings so blank form fields reach the model
def search_options(city: Optional[str] = None,
                   minimum_price_per_night: Optional[str] = None,
                   maximum_price_per_night: Optional[str] = None,
                   minimum_rating: Optional[str] = None) -> schemas.SearchOptions:
    try:
        return schemas.SearchOptions(
            city=city,
            minimum_price_per_night=minimum_price_per_night,
            maximum_price_per_night=maximum_price_per_night,
            minimum_rating=minimum_rating,
        )
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.errors(include_url=False, include_context=False),
        )

def to_user_response(user: schemas.User) -> schemas.UserResponse:
    return schemas.UserResponse(id=user.id, name=user.name, email=user.email)

# ---------- User Endpoints ----------
@app.post("/users/", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(user: schemas.UserCreate, service: QueryService = Depends(get_query_service)):
    try:
        db_user = service.add_user(user)
    except ConstraintViolationError:
        raise HTTPException(status_code=400, detail="Email already registered")
    return to_user_response(db_user)

@app.get("/users/by-email/{email}", response_model=schemas.UserResponse)
def get_user_by_email(email: str, service: QueryService = Depends(get_query_service)):
    user = service.get_user_with_email(email)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return to_user_response(user)

@app.get("/users/{user_id}", response_model=schemas.UserResponse)
def get_user(user_id: int, service: QueryService = Depends(get_query_service)):
    user = service.get_user_with_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return to_user_response(user)

# ---------- Reservation Endpoints ----------
@app.get("/users/{user_id}/reservations", response_model=List[schemas.ReservationListing])
def list_user_reservations(user_id: int, limit: Optional[int] = Query(None, ge=1),
                           service: QueryService = Depends(get_query_service)):
    if not service.get_user_with_id(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return service.get_all_reservations(user_id, limit)

# ---------- Property Endpoints ----------
@app.post("/properties/", response_model=schemas.Property, status_code=status.HTTP_201_CREATED)
def create_property(property: schemas.PropertyCreate, service: QueryService = Depends(get_query_service)):
    try:
        return service.add_property(property)
    except ConstraintViolationError:
        raise HTTPException(status_code=400, detail="Owner does not exist")

@app.get("/properties/", response_model=List[schemas.PropertyListing])
def list_properties(options: schemas.SearchOptions = Depends(search_options), limit: Optional[int] = Query(None, ge=1),
                    service: QueryService = Depends(get_query_service)):
    return service.get_all_properties(options, limit)
