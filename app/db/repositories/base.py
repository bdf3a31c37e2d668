"""
File: app/db/repositories/base.py
Description: 通用异步 Repository 基类

BaseRepository[ModelType, CreateSchemaType, UpdateSchemaType] 提供：
1. 主键查询 / 存在性判断
2. create / update：接受 Pydantic Schema 或字典 (Service 层补充派生字段时用字典)
3. 语句执行辅助 (_first / _all)，供各领域仓储复用
4. dialect_name：按方言选择 INSERT ... ON CONFLICT 构造器

约定：写操作只 flush 不 commit，事务边界由 Service 层控制。

Created: 2026-10-17
"""

from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class BaseRepository(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    通用仓储基类。
    """

    # 通用 update 禁止修改的系统字段 (updated_at 由 onupdate 或 Service 显式维护)
    PROTECTED_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"id", "created_at", "updated_at"}
    )

    def __init__(self, model: type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    @property
    def dialect_name(self) -> str:
        """当前会话绑定的数据库方言 (postgresql / sqlite)"""
        return self.session.get_bind().dialect.name

    # --------------------------------------------------------------------------
    # 查询
    # --------------------------------------------------------------------------

    async def get(self, id: Any) -> ModelType | None:
        return await self.session.get(self.model, id)

    async def exists(self, id: Any) -> bool:
        return await self.get(id) is not None

    async def _first(self, stmt: Select[Any]) -> Any:
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def _all(self, stmt: Select[Any]) -> list[Any]:
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # --------------------------------------------------------------------------
    # 写入
    # --------------------------------------------------------------------------

    @staticmethod
    def _to_dict(obj_in: BaseModel | dict[str, Any]) -> dict[str, Any]:
        if isinstance(obj_in, dict):
            return obj_in
        return obj_in.model_dump(exclude_unset=True)

    async def create(self, obj_in: CreateSchemaType | dict[str, Any]) -> ModelType:
        """
        创建记录并 flush (拿到默认值与主键)，不 commit。
        """
        db_obj = self.model(**self._to_dict(obj_in))
        self.session.add(db_obj)
        await self.session.flush()
        await self.session.refresh(db_obj)
        return db_obj

    async def update(
        self, db_obj: ModelType, obj_in: UpdateSchemaType | dict[str, Any]
    ) -> ModelType:
        """
        只更新传入的字段，PROTECTED_FIELDS 会被静默忽略。
        """
        changes = {
            key: value
            for key, value in self._to_dict(obj_in).items()
            if key not in self.PROTECTED_FIELDS
        }
        if hasattr(db_obj, "update"):
            db_obj.update(**changes)  # type: ignore[union-attr]
        else:
            for key, value in changes.items():
                setattr(db_obj, key, value)

        self.session.add(db_obj)
        await self.session.flush()
        await self.session.refresh(db_obj)
        return db_obj
