"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.admin import router as admin_router
from api.v1.routes.answers import router as answers_router
from api.v1.routes.feed import router as feed_router
from api.v1.routes.profiles import router as profiles_router
from api.v1.routes.questions import router as questions_router

router = APIRouter()
router.include_router(profiles_router)
router.include_router(questions_router)
router.include_router(answers_router)
router.include_router(feed_router)
router.include_router(admin_router)
