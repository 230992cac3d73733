"""
Mark entry API routes
Two-step flow: store the subject config, then send the students
"""
from fastapi import APIRouter, Depends, status

from examflex.schemas import (
    MarkEntryConfigRequest, MarkProcessRequest, MarkCalculateRequest,
    ConfigSavedResponse, ProcessResponse
)
from examflex.config import settings
from examflex.core import Messages, BadRequestException, ConfigExpiredException, mark_entry_logger
from examflex.services import authenticate_client, config_store, mark_service

router = APIRouter()


def check_batch_size(count: int) -> None:
    """Reject batches above the configured limit"""
    if count > settings.MAX_BATCH_STUDENTS:
        raise BadRequestException(Messages.TOO_MANY_STUDENTS.format(limit=settings.MAX_BATCH_STUDENTS))


@router.post("/config", response_model=ConfigSavedResponse, status_code=status.HTTP_202_ACCEPTED)
async def store_config(request: MarkEntryConfigRequest, client: str = Depends(authenticate_client)):
    """
    Store a mark entry config for two hours
    """
    temp_id, expires_at = config_store.save(request.institute_id, request.model_dump(mode="json"))
    mark_entry_logger.info(f"Mark entry config saved by {client}: temp_id={temp_id}")

    return ConfigSavedResponse(
        status=Messages.CONFIG_SAVED,
        temp_id=temp_id,
        expires_at=expires_at.strftime("%Y-%m-%d %H:%M:%S")
    )


@router.post("/process", response_model=ProcessResponse)
async def process_students(request: MarkProcessRequest, client: str = Depends(authenticate_client)):
    """
    Calculate marks for students against a stored config
    """
    check_batch_size(len(request.students))

    config = config_store.get(request.temp_id)
    mark_entry_logger.info(f"Fetched temp config {request.temp_id}: exists={config is not None}")
    if config is None:
        raise ConfigExpiredException(request.temp_id)

    results = mark_service.compute_from_config(config, request.students)

    # A config is used once
    config_store.delete(request.temp_id)
    mark_entry_logger.info(f"Deleted temp config {request.temp_id} after processing")

    return ProcessResponse(message=Messages.MARKS_CALCULATED, results=results)


@router.post("/calculate", response_model=ProcessResponse)
async def calculate_marks(request: MarkCalculateRequest, client: str = Depends(authenticate_client)):
    """
    Calculate marks with config and students in one request
    """
    check_batch_size(len(request.students))
    results = mark_service.compute_exam_marks(request)
    return ProcessResponse(message=Messages.MARKS_CALCULATED, results=results)
