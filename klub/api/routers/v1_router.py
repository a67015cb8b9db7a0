from fastapi import APIRouter

from klub.api.routers import bills, health, payments, restaurants, scan, users
from klub.schemas.errors import ErrorResponse

routes = APIRouter()

error_responses = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

# Include all routers
routes.include_router(health.router)
routes.include_router(restaurants.router, responses=error_responses)
routes.include_router(users.router, responses=error_responses)
routes.include_router(bills.router, responses=error_responses)
routes.include_router(payments.router, responses=error_responses)
routes.include_router(scan.router, responses=error_responses)
