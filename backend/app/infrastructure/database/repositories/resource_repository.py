"""SQLAlchemy implementation of the ResourceRepository."""

import uuid

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces import ResourceRepository
from app.domain.entities import Resource
from app.domain.exceptions import StorageError
from app.infrastructure.database.models import ResourceModel


class SQLAlchemyResourceRepository(ResourceRepository):
    """Concrete resource repository backed by PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: ResourceModel) -> Resource:
        """Map ORM model → domain entity."""
        return Resource(
            id=model.id,
            content=model.content,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    async def create(self, resource: Resource) -> Resource:
        if not resource.id:
            resource.id = str(uuid.uuid4())

        model = ResourceModel(
            id=resource.id,
            content=resource.content,
            created_at=resource.created_at,
            updated_at=resource.updated_at,
        )
        try:
            self._session.add(model)
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise StorageError("insert", str(exc)) from exc
        return self._to_entity(model)

    async def get_by_id(self, resource_id: str) -> Resource | None:
        try:
            result = await self._session.execute(
                select(ResourceModel).where(ResourceModel.id == resource_id)
            )
        except SQLAlchemyError as exc:
            raise StorageError("select", str(exc)) from exc
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_all(self) -> list[Resource]:
        try:
            result = await self._session.execute(
                select(ResourceModel).order_by(
                    ResourceModel.created_at.asc(), ResourceModel.id.asc()
                )
            )
        except SQLAlchemyError as exc:
            raise StorageError("select", str(exc)) from exc
        return [self._to_entity(m) for m in result.scalars().all()]

    async def delete(self, resource_id: str) -> bool:
        try:
            result = await self._session.execute(
                delete(ResourceModel).where(ResourceModel.id == resource_id)
            )
        except SQLAlchemyError as exc:
            raise StorageError("delete", str(exc)) from exc
        return result.rowcount > 0

    async def delete_all(self) -> int:
        try:
            result = await self._session.execute(delete(ResourceModel))
        except SQLAlchemyError as exc:
            raise StorageError("delete", str(exc)) from exc
        return result.rowcount
