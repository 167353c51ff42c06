"""
JWT token handler.
Validates bearer tokens and extracts the principal and its role claims.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Union
from jose import JWTError, jwt

from timetracker.config import Settings, get_settings
from timetracker.domain.models.base import ValidationError


RoleClaim = Optional[Union[str, List[str]]]


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as described by its token."""
    
    user_id: str
    role_claim: RoleClaim = None
    email: Optional[str] = None


class JWTHandler:
    """Handles JWT token validation and user extraction."""
    
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.jwt_secret = self.settings.jwt_secret_key
        self.jwt_algorithm = self.settings.jwt_algorithm
    
    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token.
        
        Args:
            token: JWT token string, with or without the 'Bearer ' prefix
            
        Returns:
            Dict containing token payload
            
        Raises:
            ValidationError: If token is invalid, expired or has no subject
        """
        if token.startswith('Bearer '):
            token = token[7:]
        
        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
                options={"verify_aud": False}
            )
        except JWTError as e:
            raise ValidationError(f"Invalid JWT token: {str(e)}") from e
        
        if not payload.get('sub'):
            raise ValidationError("Token missing user ID (sub claim)")
        
        return payload
    
    def extract_role_claim(self, payload: Dict[str, Any]) -> RoleClaim:
        """
        Role information carried by the token.
        
        A list claim (``roles``, ``groups``...) wins over a single role claim
        (``role``, ``userRole``...). Returns None when the token has neither.
        """
        for claim in self.settings.jwt_roles_claims:
            value = payload.get(claim)
            if isinstance(value, str) and value:
                return [value]
            if isinstance(value, (list, tuple)):
                roles = [str(item) for item in value if item and str(item).strip()]
                if roles:
                    return roles
        
        for claim in self.settings.jwt_role_claims:
            value = payload.get(claim)
            if isinstance(value, str) and value:
                return value
        
        return None
    
    def get_principal(self, token: str) -> Principal:
        """
        Verify the token and describe its bearer.
        
        Raises:
            ValidationError: If token is invalid
        """
        payload = self.verify_token(token)
        return Principal(
            user_id=str(payload['sub']),
            role_claim=self.extract_role_claim(payload),
            email=payload.get('email')
        )
    
    def create_access_token(
        self,
        user_id: str,
        roles: Optional[Sequence[str]] = None,
        expires_in: timedelta = timedelta(hours=1),
        extra_claims: Optional[Dict[str, Any]] = None
    ) -> str:
        """Issue a signed token, used by tests and local tooling."""
        now = datetime.now(timezone.utc)
        claims: Dict[str, Any] = {
            "sub": user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + expires_in).timestamp()),
        }
        if roles:
            claims["roles"] = list(roles)
        if extra_claims:
            claims.update(extra_claims)
        return jwt.encode(claims, self.jwt_secret, algorithm=self.jwt_algorithm)
