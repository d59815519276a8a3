from fastapi import APIRouter

from app.api.routes import submit

api_router = APIRouter()
api_router.include_router(submit.router)
