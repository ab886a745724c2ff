"""Members Service schemas package."""

from services.members_service.schemas.session import (  # noqa: F401
    NavigationResponse,
    NavLinkResponse,
    RefreshRequest,
    SessionResponse,
    SessionStateResponse,
    SidebarResponse,
    SignInRequest,
    SignUpRequest,
    SignUpResponse,
)
from services.members_service.schemas.users import (  # noqa: F401
    AccountDeletion,
    BulkActionResponse,
    PasswordChange,
    ProfileUpdate,
    RoleChange,
    UserListResponse,
    UserResponse,
    UserSelection,
)
