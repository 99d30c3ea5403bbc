"""
Modelos de base de datos (ORM).
"""
from sqlalchemy import Column, String, Integer, DateTime, Text, JSON, Boolean, ForeignKey
from sqlalchemy.sql import func

from horrorsite.infrastructure.database.session import Base


class UserModel(Base):
    """
    Modelo de base de datos para usuarios.

    El job de sync solo crea al autor del sistema; el resto de usuarios
    los da de alta el sitio.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    user_meta = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, is_admin={self.is_admin})>"


class PostModel(Base):
    """
    Modelo de base de datos para historias publicadas.

    El slug es la llave de idempotencia del sync: un mismo post de
    WordPress siempre cae en la misma fila.
    """

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(500), nullable=False)
    content = Column(Text, nullable=False)
    excerpt = Column(Text, nullable=True)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    is_secret = Column(Boolean, default=False, nullable=False)
    is_admin_post = Column(Boolean, default=False, nullable=False)
    mature_content = Column(Boolean, default=False, nullable=False)
    reading_time_minutes = Column(Integer, nullable=False, default=1)
    theme_category = Column(String(255), nullable=True)
    post_meta = Column("metadata", JSON, nullable=True)  # Procedencia: wordpressId, importSource, syncId...
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Post(id={self.id}, slug={self.slug}, title={self.title})>"
