from fastapi import APIRouter, Depends, status
import uuid

from matrimatch.core.dependencies import get_match_service
from matrimatch.schemas.match import MatchActionRequest, MatchCreate, MatchResponse
from matrimatch.services.matches import MatchService


router = APIRouter(prefix="/matches", tags=["Matches"])


@router.post("", response_model=MatchResponse, status_code=status.HTTP_201_CREATED)
async def create_match(
    payload: MatchCreate,
    service: MatchService = Depends(get_match_service),
):
    """
    Score a pair and store it as a match for the user.
    Scoring an existing pair again refreshes its scores.
    """
    match = await service.score_and_store(payload.user, payload.candidate, payload.match_type)
    return MatchResponse.model_validate(match)


@router.get("/{match_id}", response_model=MatchResponse)
async def get_match(
    match_id: uuid.UUID,
    service: MatchService = Depends(get_match_service),
):
    """Fetch a match; each fetch counts as a profile view."""
    match = await service.view(match_id)
    return MatchResponse.model_validate(match)


@router.post("/{match_id}/actions", response_model=MatchResponse)
async def act_on_match(
    match_id: uuid.UUID,
    payload: MatchActionRequest,
    service: MatchService = Depends(get_match_service),
):
    """
    Like, super like, dislike or block a match.
    - Both sides liking makes the match mutual and opens communication
    - Blocked matches accept no further likes or dislikes
    """
    match = await service.act(match_id, payload.actor_id, payload.action)
    return MatchResponse.model_validate(match)
