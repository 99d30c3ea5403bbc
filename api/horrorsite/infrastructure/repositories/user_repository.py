"""
Repositorio de usuarios.
"""
from typing import Any, Dict, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from horrorsite.infrastructure.database.models import UserModel


class UserRepository:
    """Repositorio para gestionar usuarios en la base de datos."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> Optional[UserModel]:
        result = await self.db.execute(
            select(UserModel).where(UserModel.email == email)
        )
        return result.scalars().first()

    async def create(
        self,
        *,
        username: str,
        email: str,
        password_hash: str,
        is_admin: bool = False,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> UserModel:
        """Crea un usuario y devuelve la fila refrescada."""
        user = UserModel(
            username=username,
            email=email,
            password_hash=password_hash,
            is_admin=is_admin,
            user_meta=metadata,
        )
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)
        return user
