"""
Settings router — the signed-in user's own profile.
"""

from fastapi import APIRouter, Depends

from madrasah.core.dependencies import first_row, repository
from madrasah.repositories.profiles import ProfileRepository
from madrasah.schemas.auth import ProfileUpdate
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/settings", tags=["Settings"])


@router.get("/profile")
async def get_profile(repo: ProfileRepository = Depends(repository(ProfileRepository))):
    return success_response(data=repo.me())


@router.put("/profile")
async def update_profile(body: ProfileUpdate, repo: ProfileRepository = Depends(repository(ProfileRepository))):
    profile = first_row(repo.update(body.to_record()), "Profile")
    return success_response(data=profile, message="প্রোফাইল আপডেট সফল হয়েছে")
