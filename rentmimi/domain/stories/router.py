"""Story router - partner stories feed"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from ...auth import get_current_user, require_role
from ...schemas import MimiStory, User
from ...store import DataStore, get_store
from .service import StoryService

router = APIRouter(prefix="/stories", tags=["Stories"])


class StoryCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)


def get_story_service(store: DataStore = Depends(get_store)) -> StoryService:
    """Dependency injection for StoryService"""
    return StoryService(store)


@router.get("", response_model=list[MimiStory])
async def list_stories(
    limit: int = Query(50, ge=1, le=200),
    service: StoryService = Depends(get_story_service),
):
    return service.list_stories(limit)


@router.post("", response_model=MimiStory, status_code=201)
async def create_story(
    data: StoryCreate,
    current_user: User = Depends(require_role("partner")),
    service: StoryService = Depends(get_story_service),
):
    return service.create_story(current_user, data.content.strip())


@router.delete("/{story_id}")
async def delete_story(
    story_id: str,
    current_user: User = Depends(get_current_user),
    service: StoryService = Depends(get_story_service),
):
    return service.delete_story(current_user, story_id)
