"""
Account services - registration, login, password reset, profile and addresses
"""
import logging
import secrets
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple

from django.conf import settings
from django.contrib.auth.hashers import make_password
from django.db import transaction
from django.utils import timezone

from apps.cart.models import Cart
from apps.core.exceptions import (
    AuthenticationException,
    ConflictException,
    NotFoundException,
    ValidationException,
)
from .models import Address, User
from .tokens import generate_token

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ('first_name', 'last_name', 'phone')
ADDRESS_FIELDS = (
    'full_name', 'address_line1', 'address_line2', 'city', 'state',
    'postal_code', 'country', 'phone', 'is_default',
)


def normalize_email(email: str) -> str:
    return (email or '').strip().lower()


class AuthService:
    """
    Credential handling: register, login, password reset and change.
    """

    def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        phone: Optional[str] = None,
    ) -> Tuple[User, str]:
        email = normalize_email(email)
        if User.objects.filter(email=email).exists():
            raise ConflictException("Email already registered")

        with transaction.atomic():
            user = User(email=email, first_name=first_name, last_name=last_name, phone=phone)
            user.set_password(password)
            user.save()
            Cart.objects.create(user=user)

        logger.info(f"Registered user {user.id} ({email})")
        return user, generate_token(user)

    def login(self, email: str, password: str) -> Tuple[User, str]:
        email = normalize_email(email)
        user = User.objects.filter(email=email).first()

        if user is None:
            # Run the hasher anyway so both failure paths cost the same
            make_password(password)
            logger.warning(f"Login failed for unknown email {email}")
            raise AuthenticationException("Invalid email or password")

        if not user.check_password(password) or not user.is_active:
            logger.warning(f"Login failed for user {user.id}")
            raise AuthenticationException("Invalid email or password")

        return user, generate_token(user)

    def request_password_reset(self, email: str) -> str:
        email = normalize_email(email)
        user = User.objects.filter(email=email).first()
        if user is None:
            raise NotFoundException("User")

        ttl = settings.STORE['PASSWORD_RESET_TTL_MINUTES']
        user.reset_token = secrets.token_urlsafe(32)
        user.reset_token_expiry = timezone.now() + timedelta(minutes=ttl)
        user.save(update_fields=['reset_token', 'reset_token_expiry', 'updated_at'])

        logger.info(f"Password reset token issued for user {user.id}")
        return user.reset_token

    def reset_password(self, token: str, new_password: str) -> User:
        user = User.objects.filter(
            reset_token=token,
            reset_token_expiry__gte=timezone.now(),
        ).first()
        if not token or user is None:
            raise ValidationException("Invalid or expired reset token", field="token")

        user.set_password(new_password)
        user.reset_token = None
        user.reset_token_expiry = None
        user.save(update_fields=['password', 'reset_token', 'reset_token_expiry', 'updated_at'])

        logger.info(f"Password reset for user {user.id}")
        return user

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        if not user.check_password(current_password):
            raise ValidationException("Current password is incorrect", field="current_password")
        user.set_password(new_password)
        user.save(update_fields=['password', 'updated_at'])
        logger.info(f"Password changed for user {user.id}")


class ProfileService:
    """
    Profile fields and the user's address book.
    """

    def get_profile(self, user: User) -> User:
        return user

    def update_profile(self, user: User, **changes: Any) -> User:
        fields = [name for name in PROFILE_FIELDS if name in changes]
        for name in fields:
            setattr(user, name, changes[name])
        if fields:
            user.save(update_fields=fields + ['updated_at'])
        return user

    def list_addresses(self, user: User) -> List[Address]:
        return list(Address.objects.filter(user=user).order_by('-is_default', '-created_at'))

    def get_address(self, user: User, address_id) -> Address:
        address = Address.objects.filter(pk=address_id, user=user).first()
        if address is None:
            raise NotFoundException("Address")
        return address

    def create_address(self, user: User, **fields: Any) -> Address:
        data = self._address_data(fields)
        address = Address(user=user, **data)
        address.save()
        logger.info(f"Address {address.id} created for user {user.id}")
        return address

    def update_address(self, user: User, address_id, **fields: Any) -> Address:
        address = self.get_address(user, address_id)
        for name, value in self._address_data(fields).items():
            setattr(address, name, value)
        address.save()
        return address

    def delete_address(self, user: User, address_id) -> None:
        address = self.get_address(user, address_id)
        address.delete()
        logger.info(f"Address {address_id} deleted for user {user.id}")

    @staticmethod
    def _address_data(fields: Dict[str, Any]) -> Dict[str, Any]:
        return {name: fields[name] for name in ADDRESS_FIELDS if name in fields}
