"""
Test factories for generating realistic test data.

Uses factory_boy for declarative test data generation. Factories build
camelCase API payloads.
"""

from .user import UserFactory, AdminUserFactory, RepresentativeUserFactory
from .company import CompanyFactory, InactiveCompanyFactory, PendingCompanyFactory
from .catalogue import (
    CategoryFactory,
    MembershipTypeFactory,
    PrivateMembershipTypeFactory,
    CertificateFactory,
    RoleFactory,
)
from .opinion import OpinionFactory

__all__ = [
    "UserFactory",
    "AdminUserFactory",
    "RepresentativeUserFactory",
    "CompanyFactory",
    "InactiveCompanyFactory",
    "PendingCompanyFactory",
    # Catalogue
    "CategoryFactory",
    "MembershipTypeFactory",
    "PrivateMembershipTypeFactory",
    "CertificateFactory",
    "RoleFactory",
    "OpinionFactory",
]
