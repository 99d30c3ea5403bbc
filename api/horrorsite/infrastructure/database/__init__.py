"""
Configuración de base de datos.

Importa todos los modelos para que se registren con Base
antes de crear las tablas.
"""
from horrorsite.infrastructure.database.session import Base, Database
from horrorsite.infrastructure.database.models import (
    UserModel,
    PostModel
)
