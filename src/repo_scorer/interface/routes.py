"""API routes: thin controllers that delegate to the use case."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header

from repo_scorer.domain.value_objects import ScanRequest
from repo_scorer.interface.dependencies import get_use_case
from repo_scorer.interface.schemas import ErrorResponse, ScanRequestBody, ScanResultResponse
from repo_scorer.services.scan_repositories import ScanRepositoriesUseCase

router = APIRouter()


@router.post(
    "/scans",
    status_code=201,
    response_model=ScanResultResponse,
    responses={
        401: {"model": ErrorResponse, "description": "GitHub rejected the access token"},
        404: {"model": ErrorResponse, "description": "GitHub account not found"},
        422: {"model": ErrorResponse, "description": "Invalid account handle"},
        429: {"model": ErrorResponse, "description": "GitHub API rate limit exceeded"},
        502: {"model": ErrorResponse, "description": "GitHub API error"},
        503: {"model": ErrorResponse, "description": "GitHub unreachable"},
        504: {"model": ErrorResponse, "description": "Scan timed out"},
    },
)
async def create_scan(
    body: ScanRequestBody,
    account_identity: str = Header(alias="X-Account-Identity", min_length=1),
    use_case: ScanRepositoriesUseCase = Depends(get_use_case),
) -> ScanResultResponse:
    """Scan a GitHub account and store the scored repositories."""
    request = ScanRequest.create(body.account_handle, body.credential)
    result = await use_case.execute(account_identity, request)
    return ScanResultResponse.from_domain(result)


@router.get("/scans", response_model=list[ScanResultResponse])
async def list_scans(
    account_identity: str = Header(alias="X-Account-Identity", min_length=1),
    use_case: ScanRepositoriesUseCase = Depends(get_use_case),
) -> list[ScanResultResponse]:
    """Return the caller's past scans, newest first."""
    results = await use_case.history(account_identity)
    return [ScanResultResponse.from_domain(r) for r in results]
