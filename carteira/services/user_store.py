"""Persistence-backed lookup and creation of users."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from carteira.models.user import User


class DuplicateEmailError(Exception):
    """Raised when an insert violates the unique email constraint."""


class UserStore:
    """Identity store over the ``users`` table."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> User | None:
        """Get a user by email."""
        return self.db.query(User).filter(User.email == email).first()

    def get_by_id(self, user_id: str) -> User | None:
        """Get a user by id."""
        return self.db.query(User).filter(User.id == user_id).first()

    def create(self, email: str, password_hash: str, name: str) -> User:
        """Insert a new user.

        Raises:
            DuplicateEmailError: another row with the same email was committed first.
            SQLAlchemyError: any other store failure. The session is rolled back.
        """
        user = User(email=email, password_hash=password_hash, name=name)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateEmailError(email) from e
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(user)
        return user
