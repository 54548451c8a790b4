from app.schemas.company import (
    CompanyCreate,
    CompanyUpdate,
    CompanyResponse,
    CompanyWithDetails,
    CompanyListResponse,
)
from app.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryListResponse,
)
from app.schemas.membership_type import (
    PriceOption,
    MembershipTypeCreate,
    MembershipTypeUpdate,
    MembershipTypeResponse,
    MembershipTypeListResponse,
    PriceLookupResponse,
    EndDateResponse,
)
from app.schemas.certificate import (
    CertificateCreate,
    CertificateUpdate,
    CertificateResponse,
    CertificateListResponse,
)
from app.schemas.role import (
    RoleCreate,
    RoleUpdate,
    RoleResponse,
    RoleListResponse,
    PermissionResponse,
)
from app.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserListResponse,
)
from app.schemas.opinion import (
    OpinionCreate,
    OpinionUpdate,
    OpinionModerationRequest,
    OpinionResponse,
    OpinionListResponse,
)
from app.schemas.statistics import StatisticsResponse

__all__ = [
    "CompanyCreate",
    "CompanyUpdate",
    "CompanyResponse",
    "CompanyWithDetails",
    "CompanyListResponse",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "CategoryListResponse",
    "PriceOption",
    "MembershipTypeCreate",
    "MembershipTypeUpdate",
    "MembershipTypeResponse",
    "MembershipTypeListResponse",
    "PriceLookupResponse",
    "EndDateResponse",
    "CertificateCreate",
    "CertificateUpdate",
    "CertificateResponse",
    "CertificateListResponse",
    "RoleCreate",
    "RoleUpdate",
    "RoleResponse",
    "RoleListResponse",
    "PermissionResponse",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserListResponse",
    "OpinionCreate",
    "OpinionUpdate",
    "OpinionModerationRequest",
    "OpinionResponse",
    "OpinionListResponse",
    "StatisticsResponse",
]
