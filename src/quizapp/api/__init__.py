"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: The login and health routers are open. Protection for /users
is declared per route (require_token or get_current_user) because the
two routes need different amounts of the gate.
"""

from fastapi import APIRouter

from quizapp.api.auth import router as auth_router
from quizapp.api.health import router as health_router
from quizapp.api.users import router as users_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(users_router, tags=["users"])
