import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional

from app.errors import (
    AuthenticationError,
    ConflictError,
    PersistenceError,
    ServiceResult,
    ValidationError,
)
from app.models.account import Account
from app.services.passwords import dummy_hash, hash_password, password_too_long, verify_password

logger = logging.getLogger(__name__)


class AccountService:

    def __init__(self, db: Session, bcrypt_rounds: Optional[int] = None):
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    def sign_up(self, name: str, email: str, password: str) -> ServiceResult[int]:
        if not (name or "").strip() or not (email or "").strip() or not password:
            return ServiceResult.failure(ValidationError("Missing fields"))
        if password_too_long(password):
            return ServiceResult.failure(ValidationError("Password is too long"))

        try:
            existing = self.db.query(Account.id).filter(Account.email == email).first()
            if existing is not None:
                return ServiceResult.failure(ConflictError("User already exists"))

            account = Account(
                name=name,
                email=email,
                password_hash=hash_password(password, rounds=self.bcrypt_rounds),
            )
            self.db.add(account)
            self.db.commit()
            self.db.refresh(account)
        except IntegrityError:
            # Lost a race with a concurrent sign-up for the same email
            self.db.rollback()
            return ServiceResult.failure(ConflictError("User already exists"))
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Sign-up failed: {e}")
            return ServiceResult.failure(PersistenceError())

        logger.info(f"Created account {account.id}")
        return ServiceResult.success(account.id)

    def authenticate(self, email: str, password: str) -> ServiceResult[int]:
        """Check credentials and return the account id."""
        if not email or not password:
            return ServiceResult.failure(ValidationError("Missing fields"))

        try:
            account = self.db.query(Account).filter(Account.email == email).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Sign-in lookup failed: {e}")
            return ServiceResult.failure(PersistenceError())

        if account is None or not account.password_hash:
            # Unknown emails take as long to reject as wrong passwords
            verify_password(password, dummy_hash())
            return ServiceResult.failure(AuthenticationError("Invalid email or password"))
        if not verify_password(password, account.password_hash):
            return ServiceResult.failure(AuthenticationError("Invalid email or password"))

        return ServiceResult.success(account.id)
