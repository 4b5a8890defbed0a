"""Application service for accounts and authentication."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos import RegisterRequest, TokenDTO, UserContext, UserDTO
from core.data.mappers import UserMapper
from core.data.models import BuyerModel, ProducerModel, UserModel
from core.data.uow import UnitOfWork, create_uow
from core.domain.enums import UserRole
from core.domain.exceptions import AuthenticationError, BusinessRuleError, NotFoundError, ValidationError
from core.infrastructure.security import create_access_token, hash_password, verify_password
from core.settings.sections.auth import AuthSettings

logger = logging.getLogger(__name__)


class UserApplicationService:
    """Registration, login and profile lookups."""

    def __init__(self, session_factory: async_sessionmaker, settings: AuthSettings) -> None:
        self._session_factory = session_factory
        self._settings = settings

    async def register(self, request: RegisterRequest) -> TokenDTO:
        """
        Create a BUYER or PRODUCER account with its marketplace profile.

        Raises:
            ValidationError: If the role is ADMIN
            BusinessRuleError: If the email is already registered
        """
        if request.role == UserRole.ADMIN:
            raise ValidationError("Admin accounts cannot be self-registered")

        email = request.email.lower()
        async with create_uow(self._session_factory) as uow:
            if await uow.users.get_by_email(email) is not None:
                raise BusinessRuleError("User already exists with this email")

            user = await uow.users.add(
                UserModel(
                    email=email,
                    password_hash=hash_password(request.password),
                    name=request.name,
                    phone=request.phone,
                    role=request.role.value,
                )
            )
            if request.role == UserRole.PRODUCER:
                await uow.users.add_producer(
                    ProducerModel(
                        user_id=user.id,
                        business_name=request.business_name,
                        location=request.location,
                    )
                )
            else:
                await uow.users.add_buyer(BuyerModel(user_id=user.id))

            await uow.commit()
            logger.info(f"✅ Registered {request.role.value} {email}")
            return await self._token_for(uow, user)

    async def authenticate(self, email: str, password: str) -> TokenDTO:
        async with create_uow(self._session_factory) as uow:
            user = await uow.users.get_by_email(email.lower())
            if user is None or not user.is_active or not verify_password(password, user.password_hash):
                raise AuthenticationError("Invalid credentials")
            return await self._token_for(uow, user)

    async def get_profile(self, user: UserContext) -> UserDTO:
        async with create_uow(self._session_factory) as uow:
            model = await uow.users.get(user.id)
            if model is None:
                raise NotFoundError("User", user.id)
            return await self._profile(uow, model)

    async def ensure_admin(self, email: str, password: str, name: Optional[str] = None) -> bool:
        """
        Create the bootstrap admin unless the email is taken.

        Returns:
            True if a user was created
        """
        email = email.lower()
        async with create_uow(self._session_factory) as uow:
            if await uow.users.get_by_email(email) is not None:
                return False
            await uow.users.add(
                UserModel(
                    email=email,
                    password_hash=hash_password(password),
                    name=name or "Marketplace Admin",
                    role=UserRole.ADMIN.value,
                )
            )
            await uow.commit()
        logger.info(f"✅ Bootstrap admin created: {email}")
        return True

    async def _profile(self, uow: UnitOfWork, user: UserModel) -> UserDTO:
        buyer = await uow.users.get_buyer_by_user(user.id)
        producer = await uow.users.get_producer_by_user(user.id)
        return UserMapper.to_dto(user, buyer=buyer, producer=producer)

    async def _token_for(self, uow: UnitOfWork, user: UserModel) -> TokenDTO:
        token = create_access_token(
            {"sub": user.id, "email": user.email, "name": user.name, "role": user.role},
            self._settings,
        )
        return TokenDTO(access_token=token, user=await self._profile(uow, user))
