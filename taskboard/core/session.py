"""
Session token management.

Signed, time-limited tokens that carry the authenticated user id.
This is the identity provider seen by the HTTP layer.
"""

from typing import Optional
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from taskboard.core.config import settings


class SessionManager:
    """Manages signed session tokens."""
    
    def __init__(self, secret_key: Optional[str] = None, max_age: Optional[int] = None):
        self.serializer = URLSafeTimedSerializer(secret_key or settings.SECRET_KEY, salt="taskboard-session")
        self.max_age = max_age if max_age is not None else settings.SESSION_MAX_AGE_SECONDS
    
    def create_session_token(self, user_id: str) -> str:
        """
        Create a signed session token.
        
        Args:
            user_id: Opaque user identifier
            
        Returns:
            Signed token string
        """
        return self.serializer.dumps({"user_id": str(user_id)})
    
    def verify_session_token(self, token: str) -> Optional[str]:
        """
        Verify and decode a session token.
        
        Args:
            token: Signed token string
            
        Returns:
            The user id if the token is valid, None otherwise
        """
        try:
            data = self.serializer.loads(token, max_age=self.max_age)
        except (BadSignature, SignatureExpired):
            return None
        if not isinstance(data, dict):
            return None
        user_id = data.get("user_id")
        return str(user_id) if user_id else None


# Global session manager instance
session_manager = SessionManager()
