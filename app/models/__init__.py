from app.models.user import User
from app.models.category import Category
from app.models.membership_type import MembershipType
from app.models.certificate import Certificate
from app.models.company import Company, CompanyCategory, CompanyCertificate
from app.models.role import Role
from app.models.opinion import Opinion

__all__ = [
    "User",
    "Category",
    "MembershipType",
    "Certificate",
    "Company",
    "CompanyCategory",
    "CompanyCertificate",
    "Role",
    "Opinion",
]
