"""Authentication service for verifying bearer tokens issued to project authors"""

from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from streammap.config import settings


class AuthService:
    """Service for handling JWT access tokens"""

    @staticmethod
    def generate_token(
        data: Dict[str, Any],
        expires_delta: Optional[timedelta] = None,
        token_type: str = "access"
    ) -> str:
        """
        Generate a JWT token with the provided data

        Args:
            data: Dictionary of claims to include in the token
            expires_delta: Optional expiration time delta (defaults to jwt_expiration_hours)
            token_type: Type of token

        Returns:
            Encoded JWT token string
        """
        to_encode = data.copy()

        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(hours=settings.jwt_expiration_hours)

        to_encode.update({
            "exp": expire,
            "iat": datetime.utcnow(),
            "iss": "streammap-api",
            "type": token_type
        })

        # Use jwt_secret if available, otherwise fall back to secret_key
        secret = settings.jwt_secret or settings.secret_key
        return jwt.encode(
            to_encode,
            secret,
            algorithm=settings.jwt_algorithm
        )

    @staticmethod
    def decode_token(token: str) -> Optional[Dict[str, Any]]:
        """
        Decode and validate a JWT token

        Args:
            token: JWT token string to decode

        Returns:
            Dictionary of token claims if valid, None otherwise
        """
        try:
            secret = settings.jwt_secret or settings.secret_key
            return jwt.decode(
                token,
                secret,
                algorithms=[settings.jwt_algorithm]
            )
        except JWTError:
            return None

    @staticmethod
    def validate_token(token: str, token_type: str = "access") -> Optional[Dict[str, Any]]:
        """
        Validate a JWT token including signature, expiration, and type

        Args:
            token: JWT token string to validate
            token_type: Expected token type

        Returns:
            Dictionary of token claims if valid, None otherwise
        """
        payload = AuthService.decode_token(token)

        if not payload:
            return None

        if payload.get("type") != token_type:
            return None

        return payload

    @staticmethod
    def create_access_token(user_id: str, email: str) -> str:
        """
        Create an access token for a project author

        Args:
            user_id: User UUID
            email: User email

        Returns:
            JWT access token
        """
        data = {
            "sub": user_id,
            "email": email,
        }
        return AuthService.generate_token(data, token_type="access")
