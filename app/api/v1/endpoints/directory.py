from typing import List

from fastapi import APIRouter, Depends

from app.api.deps import get_repository
from app.schemas.room import StudyProgram

router = APIRouter()

@router.get("/study-programs", response_model=List[StudyProgram])
async def study_programs(repository=Depends(get_repository)):
    return await repository.fetch_study_programs()

@router.get("/users")
async def users(repository=Depends(get_repository)):
    """Existing users, used to pre-fill the booking form from an identity number."""
    return await repository.fetch_users()
