"""
Merit API routes
Handles merit list ranking and export
"""
from pathlib import Path
from fastapi import APIRouter, Depends, status
from fastapi.responses import FileResponse

from examflex.schemas import MeritProcessRequest, ProcessResponse
from examflex.core import Messages, BadRequestException, merit_logger
from examflex.routes.marks import check_batch_size
from examflex.services import authenticate_client, merit_service

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.post("/process", response_model=ProcessResponse, status_code=status.HTTP_202_ACCEPTED)
async def process_merit(request: MeritProcessRequest, client: str = Depends(authenticate_client)):
    """
    Rank the class and build grouped merit views
    """
    check_batch_size(len(request.results))
    merit_logger.info(
        f"Merit process request from {client}: exam='{request.exam_name}', "
        f"type={request.exam_config.merit_process_type}, students={len(request.results)}"
    )

    results = merit_service.compute_merit(request)
    return ProcessResponse(message=Messages.MERIT_CALCULATED, results=results)


@router.post("/export")
async def export_merit(request: MeritProcessRequest, client: str = Depends(authenticate_client)):
    """
    Rank the class and download the merit list as an Excel file
    """
    check_batch_size(len(request.results))

    merit = merit_service.compute_merit(request)
    if merit.get("error"):
        raise BadRequestException(merit["error"])

    file_path = merit_service.export_to_excel(request.exam_name, merit)
    return FileResponse(file_path, media_type=XLSX_MEDIA_TYPE, filename=Path(file_path).name)
