"""Identity schemas for request/response validation."""
from typing import Any, Dict, Optional
from pydantic import BaseModel


class Identity(BaseModel):
    """An authenticated user as known to the data service."""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None

    @classmethod
    def from_auth_user(cls, user: Dict[str, Any]) -> "Identity":
        """Build an identity from an auth user payload and its user_metadata."""
        metadata = user.get("user_metadata") or {}
        return cls(
            id=str(user["id"]),
            email=user.get("email"),
            name=metadata.get("full_name") or metadata.get("name"),
            avatar_url=metadata.get("avatarUrl"),
            bio=metadata.get("bio"),
        )

    @property
    def initials(self) -> str:
        if not self.name or not self.name.strip():
            return "U"
        return "".join(part[0] for part in self.name.split()).upper()[:2]


class SignUpOutcome(BaseModel):
    """Result of a sign-up call: an identity, possibly awaiting confirmation."""
    identity: Optional[Identity] = None
    pending_confirmation: bool = False


class LoginRequest(BaseModel):
    """Schema for signing in."""
    email: str = ""
    password: str = ""


class RegisterRequest(BaseModel):
    """Schema for creating an account."""
    name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""


class ProfileUpdate(BaseModel):
    """Schema for updating profile metadata."""
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None

    def to_metadata(self) -> Dict[str, Any]:
        """Map set fields onto the user_metadata keys the auth service stores."""
        keys = {"name": "full_name", "avatar_url": "avatarUrl", "bio": "bio"}
        return {keys[field]: value for field, value in self.model_dump(exclude_unset=True).items()}


class SessionResponse(BaseModel):
    """Current session state."""
    authenticated: bool
    loading: bool
    identity: Optional[Identity] = None


class AuthResponse(BaseModel):
    """Outcome of a login or registration."""
    identity: Optional[Identity] = None
    pending_confirmation: bool = False
    redirect_to: Optional[str] = None
    message: Optional[str] = None
