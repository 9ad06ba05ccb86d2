"""Extract API 라우트

세션 없이 이미지 한 장을 업로드해 분류된 전사를 바로 받는 엔드포인트.
"""

from typing import Annotated

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from src.services import extract as extract_service

router = APIRouter(prefix="/extract", tags=["extract"])

_STATUS_MAP: dict[str, int] = {
    "NO_IMAGE": status.HTTP_400_BAD_REQUEST,
    "EXTRACTION_FAILED": status.HTTP_502_BAD_GATEWAY,
}


@router.post("", response_model=extract_service.TranscriptResponse)
async def extract(
    file: Annotated[list[UploadFile] | None, File()] = None,
) -> extract_service.TranscriptResponse:
    """이미지 전사 (한 번만 시도, 여러 파일이 오면 첫 번째만 사용)"""
    try:
        return await extract_service.extract_image(file[0] if file else None)
    except extract_service.ExtractFailedError as e:
        raise HTTPException(
            status_code=_STATUS_MAP.get(e.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
            detail={"code": e.code, "message": e.message},
        ) from None
