"""
访问码服务
"""
import logging
import re
import secrets
from typing import Optional

from sqlalchemy import select, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from notetree.core.config import settings
from notetree.core.exceptions import ValidationError, AuthError, NotFoundError, ConflictError, StorageError
from notetree.db.database import write_transaction
from notetree.models.account import Account
from notetree.models.types import utcnow

logger = logging.getLogger(__name__)

MAX_GENERATE_ATTEMPTS = 20
DUPLICATE_CODE_MESSAGE = "Access code already exists. Please choose a different one."


def normalize_access_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


class AuthService:
    """访问码服务类"""

    @staticmethod
    def generate_access_code(length: int = None) -> str:
        """
        生成访问码

        Args:
            length: 访问码长度，默认使用配置中的长度

        Returns:
            str: 纯数字访问码
        """
        if length is None:
            length = settings.ACCESS_CODE_LENGTH

        return ''.join(str(secrets.randbelow(10)) for _ in range(length))

    @staticmethod
    async def _find(db: AsyncSession, code: str, active_only: bool = False) -> Optional[Account]:
        conditions = [Account.access_code == code]
        if active_only:
            conditions.append(Account.is_active == True)  # noqa: E712
        result = await db.execute(select(Account).where(and_(*conditions)))
        return result.scalar_one_or_none()

    @classmethod
    async def create_access_code(cls, db: AsyncSession, code: Optional[str] = None) -> Account:
        """
        创建访问码账户

        Args:
            db: 数据库会话
            code: 指定的访问码；为空时自动生成一个未被占用的访问码

        Returns:
            Account: 新建的账户

        Raises:
            ValidationError: 访问码格式不正确
            ConflictError: 访问码已存在
        """
        length = settings.ACCESS_CODE_LENGTH

        try:
            async with write_transaction(db, "create_access_code"):
                if code is None or code.strip() == "":
                    code = await cls._generate_unused(db)
                else:
                    code = normalize_access_code(code)
                    if not re.fullmatch(rf"[0-9]{{{length}}}", code):
                        raise ValidationError("accessCode", f"Access code must be exactly {length} digits")
                    if await cls._find(db, code) is not None:
                        raise ConflictError(DUPLICATE_CODE_MESSAGE)

                account = Account(access_code=code, is_active=True)
                db.add(account)
        except StorageError as exc:
            # 并发创建同一访问码时，唯一索引在提交时才会冲突
            if isinstance(exc.__cause__, IntegrityError):
                raise ConflictError(DUPLICATE_CODE_MESSAGE) from exc.__cause__
            raise
        await db.refresh(account)

        logger.info("Issued access code for account %s", account.id)
        return account

    @classmethod
    async def _generate_unused(cls, db: AsyncSession) -> str:
        for _ in range(MAX_GENERATE_ATTEMPTS):
            candidate = cls.generate_access_code()
            if await cls._find(db, candidate) is None:
                return candidate
        raise ConflictError("Could not generate a unique access code")

    @classmethod
    async def validate_access_code(cls, db: AsyncSession, code: Optional[str]) -> Account:
        """
        校验访问码并更新最近访问时间

        Raises:
            ValidationError: 未提供访问码
            AuthError: 访问码不存在或已停用
        """
        code = normalize_access_code(code)
        if not code:
            raise ValidationError("accessCode", "Access code is required")

        async with write_transaction(db, "validate_access_code"):
            account = await cls._find(db, code, active_only=True)
            if account is None:
                raise AuthError("Invalid access code")
            account.last_accessed = utcnow()
        await db.refresh(account)
        return account

    @classmethod
    async def deactivate_access_code(cls, db: AsyncSession, code: Optional[str]) -> Account:
        """
        停用访问码

        Raises:
            ValidationError: 未提供访问码
            NotFoundError: 访问码不存在
        """
        code = normalize_access_code(code)
        if not code:
            raise ValidationError("accessCode", "Access code is required")

        async with write_transaction(db, "deactivate_access_code"):
            account = await cls._find(db, code)
            if account is None:
                raise NotFoundError("Access code", message="Access code not found")
            account.is_active = False
        await db.refresh(account)

        logger.info("Deactivated access code for account %s", account.id)
        return account

    @classmethod
    async def resolve_owner(cls, db: AsyncSession, secret: Optional[str]) -> int:
        """
        把请求头中的访问码解析为所有者ID

        Raises:
            AuthError: 未提供访问码，或访问码无效/已停用
        """
        if not normalize_access_code(secret):
            raise AuthError("Access code is required in headers")
        try:
            account = await cls.validate_access_code(db, secret)
        except AuthError:
            raise AuthError("Invalid or inactive access code")
        return account.id
