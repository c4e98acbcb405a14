from fastapi import APIRouter

from recipe_reality.app.api.routes import extract, transcript

api_router = APIRouter(prefix="/api")
api_router.include_router(extract.router)
api_router.include_router(transcript.router)
