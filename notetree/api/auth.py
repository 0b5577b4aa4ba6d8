"""
访问码API
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from notetree.db.database import get_db
from notetree.schemas.auth import AccessCodeCreate, AccessCodeRequest
from notetree.schemas.common import ResponseModel
from notetree.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["访问码"])


@router.post("/create", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_access_code(
    request: AccessCodeCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    创建访问码
    """
    account = await AuthService.create_access_code(db, request.accessCode)
    return ResponseModel(
        message="Access code created successfully",
        accessCode=account.access_code
    )


@router.post("/validate", response_model=ResponseModel)
async def validate_access_code(
    request: AccessCodeRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    校验访问码
    """
    account = await AuthService.validate_access_code(db, request.accessCode)
    return ResponseModel(
        message="Access code validated successfully",
        userId=account.id,
        accessCode=account.access_code
    )


@router.delete("/deactivate", response_model=ResponseModel)
async def deactivate_access_code(
    request: AccessCodeRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    停用访问码
    """
    await AuthService.deactivate_access_code(db, request.accessCode)
    return ResponseModel(message="Access code deactivated successfully")
