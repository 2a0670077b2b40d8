# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Mission participation endpoints.
Thin HTTP layer: delegates ALL logic to ParticipationService.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from missionhub.core.dependencies import get_participation_service
from missionhub.models.domain import Participation
from missionhub.schemas.participation import (
    AnswerOut,
    AnswersOut,
    JoinRequest,
    ParticipationOut,
    ParticipationResult,
    ParticipationUpdate,
    StateEventOption,
)
from missionhub.services.participation_service import ParticipationService

router = APIRouter(prefix="/api/v1", tags=["Participations"])


def _rejected(participation: Participation) -> HTTPException:
    return HTTPException(status_code=422, detail={"errors": participation.errors.as_list()})


@router.get("/participations", response_model=List[ParticipationOut])
def list_participations(
    mission_id: Optional[int] = None,
    role: Optional[str] = None,
    state: List[str] = Query(default=[]),
    pickup_id: List[int] = Query(default=[]),
    x_user_id: Optional[int] = Header(default=None),
    service: ParticipationService = Depends(get_participation_service),
):
    """List participations visible to the caller identified by X-User-ID."""
    viewer = service.get_user(x_user_id)
    participations = service.list_participations(
        viewer, mission_id=mission_id, role=role, states=state, pickups=pickup_id,
    )
    return [ParticipationOut.from_domain(p) for p in participations]


@router.post("/missions/{mission_id}/participations", status_code=201,
             response_model=ParticipationOut)
def join_mission(
    mission_id: int,
    payload: JoinRequest,
    service: ParticipationService = Depends(get_participation_service),
):
    """Join a mission. Rejected joins return 422 with the error list."""
    try:
        participation = service.join_mission(
            payload.user_id, mission_id,
            payload.model_dump(exclude_unset=True, exclude={"user_id"}),
        )
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if participation.errors:
        raise _rejected(participation)
    return ParticipationOut.from_domain(participation)


@router.get("/participations/{participation_id}", response_model=ParticipationOut)
def get_participation(
    participation_id: int,
    service: ParticipationService = Depends(get_participation_service),
):
    try:
        return ParticipationOut.from_domain(service.get_participation(participation_id))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/participations/{participation_id}", response_model=ParticipationResult)
def update_participation(
    participation_id: int,
    payload: ParticipationUpdate,
    service: ParticipationService = Depends(get_participation_service),
):
    """Assign attributes and save when ``save`` is true (the default)."""
    try:
        participation, saved = service.update_with_conditional_save(
            participation_id,
            payload.attributes(),
            perform_save=payload.save,
            skip_extra_validation=payload.skip_extra_validation,
        )
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if payload.save and not saved:
        raise _rejected(participation)
    return ParticipationResult(
        participation=ParticipationOut.from_domain(participation),
        saved=saved,
        errors=list(participation.errors),
    )


@router.get("/participations/{participation_id}/events", response_model=List[StateEventOption])
def list_state_events(
    participation_id: int,
    service: ParticipationService = Depends(get_participation_service),
):
    """Events that may be fired from the current state, with display labels."""
    try:
        participation = service.get_participation(participation_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return [
        StateEventOption(label=label, event=event)
        for label, event in service.state_events_for_select(participation)
    ]


@router.post("/participations/{participation_id}/events/{event}", response_model=ParticipationOut)
def fire_event(
    participation_id: int,
    event: str,
    service: ParticipationService = Depends(get_participation_service),
):
    try:
        return ParticipationOut.from_domain(service.fire_event(participation_id, event))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/participations/{participation_id}/alternate-role")
def alternate_role(
    participation_id: int,
    service: ParticipationService = Depends(get_participation_service),
):
    try:
        participation = service.get_participation(participation_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {
        "role": participation.role_name or None,
        "alternate_role": service.alternate_role(participation),
    }


@router.get("/participations/{participation_id}/answers", response_model=AnswersOut)
def get_answers(
    participation_id: int,
    service: ParticipationService = Depends(get_participation_service),
):
    try:
        participation = service.get_participation(participation_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    store = service.answers(participation)
    return AnswersOut(
        participation_id=participation.id,
        needed=store.needed,
        answers=[
            AnswerOut(
                key=key, question_id=q.id, prompt=q.prompt, question_type=q.question_type,
                required=q.required, choices=q.choices, value=store.read(key),
            )
            for q, key in store.each_question()
        ],
    )
