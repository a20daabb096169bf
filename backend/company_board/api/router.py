from fastapi import APIRouter

from company_board.api.routes import health, pages, companies

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])  # GET /
api_router.include_router(pages.router, tags=["pages"])  # GET /, /update-form (+ POST actions)
api_router.include_router(companies.router, tags=["companies"])  # GET /api/companies, WS /ws/companies
