"""SQLAlchemy user repository and its aggregate <-> row mapper."""
from __future__ import annotations

from sqlalchemy import select

from user_registry.domain.entities.base import Identity
from user_registry.domain.entities.user import User, UserProps
from user_registry.domain.repositories import Mapper, UserRepository
from user_registry.domain.value_objects.email import Email
from user_registry.domain.value_objects.password import HashedPassword
from user_registry.infrastructure.persistence.models import UserModel
from user_registry.infrastructure.persistence.repositories.base import SQLAlchemyRepositoryBase


class UserMapper(Mapper[User, UserModel]):

    def to_domain(self, record: UserModel) -> User:
        return User(
            UserProps(
                email=Email(value=record.email),
                name=record.name,
                group=record.group,
                active=record.active,
            ),
            password=HashedPassword.from_hash(record.password),
            identity=Identity.new(
                id=record.id,
                created_at=record.created_at,
                updated_at=record.updated_at,
            ),
        )

    def to_persistence(self, entity: User) -> UserModel:
        props = entity.get_props()
        return UserModel(
            id=props["id"],
            name=props["name"],
            email=props["email"].value,
            password=entity.hashed_password.value,
            group=props["group"],
            active=props["active"],
            created_at=props["created_at"],
            updated_at=props["updated_at"],
        )


class SQLAlchemyUserRepository(SQLAlchemyRepositoryBase[User, UserModel], UserRepository):
    """Concrete ``UserRepository`` backed by SQLAlchemy async."""

    entity_type = "User"

    async def find_one_by_id(self, entity_id: str) -> User | None:
        async with self._session() as session:
            model = await session.get(UserModel, entity_id)
            return self._mapper.to_domain(model) if model else None

    async def find_one_by_email(self, email: str) -> User | None:
        async with self._session() as session:
            result = await session.execute(select(UserModel).where(UserModel.email == email))
            model = result.scalar_one_or_none()
            return self._mapper.to_domain(model) if model else None


__all__ = ["SQLAlchemyUserRepository", "UserMapper"]
