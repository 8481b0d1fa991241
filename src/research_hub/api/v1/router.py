from fastapi import APIRouter

from src.research_hub.api.v1 import applications, auth, blog, projects, uploads, users

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(projects.router)
api_router.include_router(applications.router)
api_router.include_router(uploads.router)
api_router.include_router(blog.router)
