"""
Result API routes
Handles GPA and pass/fail processing for an exam
"""
from fastapi import APIRouter, Depends, status

from examflex.schemas import ResultProcessRequest, ProcessResponse
from examflex.core import Messages, result_logger
from examflex.routes.marks import check_batch_size
from examflex.services import authenticate_client, result_service

router = APIRouter()


@router.post("/process", response_model=ProcessResponse, status_code=status.HTTP_202_ACCEPTED)
async def process_results(request: ResultProcessRequest, client: str = Depends(authenticate_client)):
    """
    Grade every student and compute GPA, totals and pass/fail
    """
    check_batch_size(len(request.students))
    result_logger.info(
        f"Result process request from {client}: exam='{request.exam_name}', "
        f"students={len(request.students)}, subjects={len(request.mark_configs)}"
    )

    results = result_service.compute_result(request)
    return ProcessResponse(message=Messages.RESULTS_CALCULATED, results=results)
