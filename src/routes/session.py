"""Session API 라우트

대화형 셸: 이미지 선택 → 추출 트리거 → 결과 조회/복사.
같은 세션에서 추출이 진행 중이어도 새 이미지 선택 요청은 바로 처리된다.
"""

import logging
from typing import Annotated, NoReturn

from fastapi import APIRouter, File, HTTPException, Response, UploadFile, status

from src.services import session as session_service
from src.services.encoder import EncodingError

router = APIRouter(prefix="/sessions", tags=["sessions"])
logger = logging.getLogger(__name__)


def _raise_lookup_error(e: Exception) -> NoReturn:
    if isinstance(e, session_service.InvalidSessionIdError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "INVALID_SESSION_ID", "message": f"잘못된 세션 ID: {e.session_id}"},
        ) from None
    if isinstance(e, session_service.SessionNotFoundError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "SESSION_NOT_FOUND", "message": f"세션을 찾을 수 없습니다: {e.session_id}"},
        ) from None
    raise e


_LOOKUP_ERRORS = (session_service.InvalidSessionIdError, session_service.SessionNotFoundError)


@router.post("", response_model=session_service.SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session() -> session_service.SessionResponse:
    return session_service.create_session()


@router.get("/{session_id}", response_model=session_service.SessionResponse)
async def read_session(session_id: str) -> session_service.SessionResponse:
    try:
        return session_service.get_session(session_id)
    except _LOOKUP_ERRORS as e:
        _raise_lookup_error(e)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str) -> Response:
    try:
        session_service.delete_session(session_id)
    except _LOOKUP_ERRORS as e:
        _raise_lookup_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{session_id}/image", response_model=session_service.SessionResponse)
async def select_image(
    session_id: str, file: Annotated[list[UploadFile], File()]
) -> session_service.SessionResponse:
    """이미지 선택 (이전 결과와 진행 중인 요청 결과는 버려진다)

    여러 파일이 오면 첫 번째만 사용.
    """
    try:
        return await session_service.select_image(session_id, file[0])
    except _LOOKUP_ERRORS as e:
        _raise_lookup_error(e)
    except EncodingError as e:
        logger.error(f"[{session_id}] 업로드 읽기 실패: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "IMAGE_UNREADABLE", "message": "이미지를 읽을 수 없습니다"},
        ) from None


@router.post("/{session_id}/extract", response_model=session_service.SessionResponse)
async def trigger_extract(session_id: str) -> session_service.SessionResponse:
    """추출 트리거

    결과는 상태(status)로 표현된다. 실패해도 200 + status="failed".
    """
    try:
        return await session_service.trigger_extract(session_id)
    except _LOOKUP_ERRORS as e:
        _raise_lookup_error(e)


@router.post("/{session_id}/copy", response_model=session_service.CopyResponse)
async def copy_result(session_id: str) -> session_service.CopyResponse:
    try:
        return session_service.copy_result(session_id)
    except _LOOKUP_ERRORS as e:
        _raise_lookup_error(e)
    except session_service.NothingToCopyError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": "NOTHING_TO_COPY", "message": "복사할 결과가 없습니다"},
        ) from None
