"""
User test factory.

Generates API payloads for directory users.
"""

import factory
from faker import Faker

fake = Faker()


class UserFactory(factory.Factory):
    """
    Factory for generating user create payloads.

    Usage:
        payload = UserFactory()
        payload = UserFactory(role="admin")
    """

    class Meta:
        model = dict

    firebaseUid = factory.Sequence(lambda n: f"firebase-uid-{n:04d}")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    displayName = factory.LazyFunction(fake.name)
    role = "user"
    estado = "activo"


class AdminUserFactory(UserFactory):
    """Factory for admin users."""

    role = "admin"


class RepresentativeUserFactory(UserFactory):
    """Factory for company representatives."""

    role = "representante"
