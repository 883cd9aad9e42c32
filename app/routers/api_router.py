from fastapi import APIRouter
from app.routers import admin, auth, companies, forum, messages, profile

# Centralized API router hub
# Routers are aggregated here, and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(admin.router, tags=["Administration"])
api_router.include_router(companies.router, tags=["Directory"])
api_router.include_router(forum.router, tags=["Forum"])
api_router.include_router(messages.router, tags=["Messages"])
api_router.include_router(profile.router, tags=["Profile"])


@api_router.get("/health", tags=["Health"])
def api_health():
    return {"ok": True}
