# oauth_store/adapters/outbound/persistence/sql_store.py (async version)

"""
Relational store backend.

Implements the IStore port on top of SQLAlchemy's async engine. Each
operation runs in its own session, committed when the operation succeeds.
Database errors are logged and raised as DatabaseOperationException;
uniqueness violations as ResourceAlreadyExistsException.
"""

import logging
import secrets
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import AsyncGenerator, List, Optional

from sqlalchemy import delete, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from oauth_store.adapters.outbound.persistence.database import (
    create_engine,
    create_session_factory,
    get_db_context,
)
from oauth_store.adapters.outbound.persistence.models import (
    Base,
    as_dict,
    Account,
    Client,
    Device,
    SessionToken,
    Token,
)
from oauth_store.adapters.outbound.security import encrypt
from oauth_store.application.ports.outbound import IStore, Id, Record
from oauth_store.domain.exceptions import (
    BackendConnectionError,
    DatabaseOperationException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
)
from oauth_store.shared.utils.encoding import buf, unbuf

logger = logging.getLogger(__name__)

CLIENT_FIELDS = ("name", "image_uri", "redirect_uri", "whitelisted", "can_grant", "trusted")
ACCOUNT_FIELDS = ("email", "email_verified", "locale")
DEVICE_FIELDS = ("name", "type", "push_callback")


class SqlStore(IStore):
    """
    IStore backed by a relational database.

    Attributes:
        engine: Async engine, disposed by close()
        session_factory: Factory of the per-operation sessions
        token_ttl: Lifetime of generated access tokens
    """

    def __init__(self, engine: AsyncEngine, session_factory: async_sessionmaker,
                 token_ttl: timedelta = timedelta(days=14)):
        self.engine = engine
        self.session_factory = session_factory
        self.token_ttl = token_ttl

    @classmethod
    async def connect(cls, settings) -> "SqlStore":
        """
        Create the engine and the tables that do not exist yet.

        Raises:
            BackendConnectionError: If no database is configured or it can't be reached
        """
        if not settings.DATABASE_URL:
            raise BackendConnectionError(detail="DATABASE_URL is not configured")

        engine = create_engine(settings.DATABASE_URL, echo=settings.DB_ECHO, pool_size=settings.DB_POOL_SIZE)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            await engine.dispose()
            logger.error(f"Error connecting to database: {str(e)}")
            raise BackendConnectionError(original_error=e)

        logger.info("Async database connection configured successfully")
        return cls(
            engine,
            create_session_factory(engine),
            token_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )

    async def close(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self, action: str) -> AsyncGenerator[AsyncSession, None]:
        """
        Session for one operation, translating database errors.

        Args:
            action: Description used in logs and error details, e.g. "creating client"
        """
        try:
            async with get_db_context(self.session_factory) as db:
                yield db
        except IntegrityError as e:
            error_msg = str(e).lower()
            if 'unique' in error_msg or 'duplicate' in error_msg:
                logger.warning(f"Uniqueness violation {action}: {str(e)}")
                raise ResourceAlreadyExistsException(detail=f"Error {action}: value already exists")
            logger.error(f"Integrity error {action}: {str(e)}")
            raise DatabaseOperationException(detail=f"Error {action}", original_error=e)
        except SQLAlchemyError as e:
            logger.error(f"Error {action}: {str(e)}")
            raise DatabaseOperationException(detail=f"Error {action}", original_error=e)

    async def ping(self) -> None:
        """
        Raises:
            BackendConnectionError: If the database can't be reached
        """
        try:
            async with self.session_factory() as db:
                await db.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error pinging database: {str(e)}")
            raise BackendConnectionError(original_error=e)

    # Clients

    async def register_client(self, client: Record) -> Record:
        async with self.session("creating client") as db:
            obj = Client(id=buf(client["id"]), **self._client_fields(client))
            db.add(obj)
            await db.flush()
            record = as_dict(obj)
        logger.info(f"Client created: {unbuf(record['id'])}")
        return record

    async def get_client(self, client_id: Id) -> Optional[Record]:
        async with self.session("fetching client") as db:
            obj = await db.get(Client, buf(client_id))
            return as_dict(obj) if obj else None

    async def get_clients(self) -> List[Record]:
        async with self.session("listing clients") as db:
            result = await db.execute(select(Client).order_by(Client.created_at))
            return [as_dict(obj) for obj in result.scalars().all()]

    async def update_client(self, client: Record) -> Record:
        async with self.session("updating client") as db:
            obj = await db.get(Client, buf(client["id"]))
            if obj is None:
                raise ResourceNotFoundException(detail="Client not found", resource_id=client["id"])
            for field, value in self._client_fields(client).items():
                setattr(obj, field, value)
            await db.flush()
            record = as_dict(obj)
        logger.info(f"Client updated: {unbuf(record['id'])}")
        return record

    async def remove_client(self, client_id: Id) -> None:
        async with self.session("removing client") as db:
            obj = await db.get(Client, buf(client_id))
            if obj is None:
                raise ResourceNotFoundException(detail="Client not found", resource_id=unbuf(client_id))
            await db.execute(delete(Token).where(Token.client_id == obj.id))
            await db.delete(obj)

    @staticmethod
    def _client_fields(client: Record) -> Record:
        fields = {f: client[f] for f in CLIENT_FIELDS if f in client}
        if client.get("hashed_secret"):
            fields["secret"] = buf(client["hashed_secret"])
        return fields

    # Accounts

    async def create_account(self, account: Record) -> Record:
        async with self.session("creating account") as db:
            obj = Account(
                uid=buf(account["uid"]),
                **{f: account[f] for f in ACCOUNT_FIELDS if f in account}
            )
            db.add(obj)
            await db.flush()
            return as_dict(obj)

    async def get_account(self, uid: Id) -> Optional[Record]:
        async with self.session("fetching account") as db:
            obj = await db.get(Account, buf(uid))
            return as_dict(obj) if obj else None

    async def delete_account(self, uid: Id) -> None:
        async with self.session("deleting account") as db:
            obj = await db.get(Account, buf(uid))
            if obj is None:
                raise ResourceNotFoundException(detail="Account not found", resource_id=unbuf(uid))
            await db.execute(delete(Device).where(Device.uid == obj.uid))
            await db.execute(delete(Token).where(Token.uid == obj.uid))
            await db.execute(delete(SessionToken).where(SessionToken.uid == obj.uid))
            await db.delete(obj)

    # Sessions

    async def create_session_token(self, token_id: Id, uid: Id, data: Optional[Record] = None) -> Record:
        data = data or {}
        async with self.session("creating session token") as db:
            if await db.get(Account, buf(uid)) is None:
                raise ResourceNotFoundException(detail="Account not found", resource_id=unbuf(uid))
            obj = SessionToken(token_id=buf(token_id), uid=buf(uid), user_agent=data.get("user_agent"))
            db.add(obj)
            await db.flush()
            return as_dict(obj)

    async def get_session_token(self, token_id: Id) -> Optional[Record]:
        async with self.session("fetching session token") as db:
            obj = await db.get(SessionToken, buf(token_id))
            return as_dict(obj) if obj else None

    async def delete_session_token(self, token_id: Id) -> None:
        async with self.session("deleting session token") as db:
            obj = await db.get(SessionToken, buf(token_id))
            if obj is None:
                raise ResourceNotFoundException(detail="Session token not found", resource_id=unbuf(token_id))
            await db.execute(delete(Device).where(Device.session_token_id == obj.token_id))
            await db.delete(obj)

    # Tokens

    async def generate_token(self, vals: Record) -> Record:
        token = secrets.token_bytes(32)
        now = datetime.utcnow()
        async with self.session("generating token") as db:
            obj = Token(
                token=encrypt.hash(token),
                client_id=buf(vals["client_id"]),
                uid=buf(vals["uid"]),
                scope=vals.get("scope", ""),
                created_at=now,
                expires_at=now + self.token_ttl,
            )
            db.add(obj)
            await db.flush()
            record = as_dict(obj)
        record["token"] = token
        return record

    async def get_access_token(self, token: Id) -> Optional[Record]:
        async with self.session("fetching access token") as db:
            obj = await db.get(Token, encrypt.hash(buf(token)))
            if obj is None or obj.expires_at <= datetime.utcnow():
                return None
            return as_dict(obj)

    async def remove_access_token(self, token: Id) -> None:
        async with self.session("removing access token") as db:
            obj = await db.get(Token, encrypt.hash(buf(token)))
            if obj is None:
                raise ResourceNotFoundException(detail="Access token not found")
            await db.delete(obj)

    # Devices

    async def create_device(self, uid: Id, session_token_id: Id, device: Record) -> Record:
        async with self.session("creating device") as db:
            session_token = await db.get(SessionToken, buf(session_token_id))
            if session_token is None or session_token.uid != buf(uid):
                raise ResourceNotFoundException(
                    detail="Session token not found", resource_id=unbuf(session_token_id)
                )
            existing = await db.execute(
                select(Device).where(Device.session_token_id == session_token.token_id)
            )
            if existing.scalar_one_or_none() is not None:
                raise ResourceAlreadyExistsException(
                    detail="Session token already has a device", resource_id=unbuf(session_token_id)
                )

            obj = Device(
                id=buf(device["id"]) if device.get("id") else secrets.token_bytes(16),
                uid=buf(uid),
                session_token_id=session_token.token_id,
                **{f: device.get(f) for f in DEVICE_FIELDS}
            )
            db.add(obj)
            await db.flush()
            return as_dict(obj)

    async def get_devices(self, uid: Id) -> List[Record]:
        async with self.session("listing devices") as db:
            result = await db.execute(select(Device).where(Device.uid == buf(uid)))
            return [as_dict(obj) for obj in result.scalars().all()]

    async def update_device(self, uid: Id, device_id: Id, changes: Record) -> Record:
        async with self.session("updating device") as db:
            obj = await self._device(db, uid, device_id)
            for field in DEVICE_FIELDS:
                if field in changes:
                    setattr(obj, field, changes[field])
            await db.flush()
            return as_dict(obj)

    async def delete_device(self, uid: Id, device_id: Id) -> None:
        async with self.session("deleting device") as db:
            obj = await self._device(db, uid, device_id)
            await db.delete(obj)

    @staticmethod
    async def _device(db: AsyncSession, uid: Id, device_id: Id) -> Device:
        obj = await db.get(Device, buf(device_id))
        if obj is None or obj.uid != buf(uid):
            raise ResourceNotFoundException(detail="Device not found", resource_id=unbuf(device_id))
        return obj
