"""
Utilidades de seguridad: hashing y generacion de credenciales.
"""
import secrets

from passlib.context import CryptContext


# Contexto para hashing de contraseñas
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class SecurityService:
    """Servicio para operaciones de seguridad."""

    @staticmethod
    def hash_password(password: str) -> str:
        """
        Genera un hash de la contraseña.

        Args:
            password: Contraseña en texto plano

        Returns:
            str: Hash de la contraseña
        """
        return pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """
        Verifica si una contraseña coincide con su hash.

        Args:
            plain_password: Contraseña en texto plano
            hashed_password: Hash de la contraseña

        Returns:
            bool: True si coinciden, False en caso contrario
        """
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def generate_secret(num_bytes: int = 32) -> str:
        """
        Genera una credencial aleatoria apta para uso criptografico.

        La usa el job de sync al crear el autor del sistema: nadie inicia
        sesion con ella, solo evita dejar una contraseña conocida.
        """
        return secrets.token_urlsafe(num_bytes)

    def generate_password_hash(self) -> str:
        """Hash bcrypt de una credencial recien generada."""
        return self.hash_password(self.generate_secret())


# Instancia global del servicio de seguridad
security_service = SecurityService()
