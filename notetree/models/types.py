"""
模型公用的列类型和默认值
"""
from datetime import datetime, timezone

from sqlalchemy import BigInteger, Integer

# PostgreSQL使用BIGINT自增主键；SQLite只有INTEGER主键才会自增
IdType = BigInteger().with_variant(Integer(), "sqlite")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


ID_MIN = -2 ** 63
ID_MAX = 2 ** 63 - 1


def fits_id_column(value) -> bool:
    """值能否作为ID传给数据库驱动；超出BIGINT范围的ID不可能存在"""
    return isinstance(value, int) and ID_MIN <= value <= ID_MAX
