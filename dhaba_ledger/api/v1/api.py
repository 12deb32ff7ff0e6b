from fastapi import APIRouter

from dhaba_ledger.api.v1.endpoints import drivers, reference

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(drivers.router)
api_router.include_router(reference.router)
