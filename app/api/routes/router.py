from fastapi import APIRouter
from app.api.routes import (
    companies,
    categories,
    membership_types,
    certificates,
    roles,
    users,
    opinions,
    statistics,
    import_data,
)

api_router = APIRouter()

# Include all directory routers
api_router.include_router(companies.router, prefix="/companies", tags=["companies"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(membership_types.router, prefix="/membership-types", tags=["membership-types"])
api_router.include_router(certificates.router, prefix="/certificates", tags=["certificates"])
api_router.include_router(roles.router, prefix="/roles", tags=["roles"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(opinions.router, prefix="/opinions", tags=["opinions"])
api_router.include_router(statistics.router, prefix="/statistics", tags=["statistics"])
api_router.include_router(import_data.import_router, prefix="/import", tags=["import"])
api_router.include_router(import_data.export_router, prefix="/export", tags=["export"])
