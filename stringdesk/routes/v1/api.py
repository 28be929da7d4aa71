from fastapi import APIRouter

from stringdesk.catalog.router import router as catalog_router
from stringdesk.clients.router import router as clients_router
from stringdesk.racquets.router import router as racquets_router
from stringdesk.jobs.router import router as jobs_router
from stringdesk.inventory.router import router as inventory_router
from stringdesk.customers.router import router as customers_router
from stringdesk.stringers.router import router as stringers_router

api_router = APIRouter()

api_router.include_router(catalog_router)
api_router.include_router(clients_router)
api_router.include_router(racquets_router)
api_router.include_router(jobs_router)
api_router.include_router(inventory_router)
api_router.include_router(customers_router)
api_router.include_router(stringers_router)
