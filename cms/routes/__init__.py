"""
HTTP routes for the CMS API.
"""

from fastapi import APIRouter

from cms.routes import admin, auth, public

router = APIRouter()
router.include_router(public.router)
router.include_router(auth.router)
router.include_router(admin.router)
