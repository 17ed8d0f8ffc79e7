"""
user_service.py — User directory
Registration, lookup and profile updates. Email is unique across users.
"""

from sqlalchemy import func
from sqlalchemy.orm import Session

from errors import ConflictError, NotFoundError, ValidationError
from models.user import User


class UserService:
    @staticmethod
    def create_user(db: Session, data: dict) -> User:
        email = (data.get("email") or "").strip().lower()
        if not email:
            raise ValidationError("Email is required")
        if UserService.exists_by_email(db, email):
            raise ConflictError(f"User with email {email} already exists")

        user = User(
            first_name=data.get("first_name", "").strip(),
            last_name=data.get("last_name", "").strip(),
            email=email,
            hashed_password=data.get("hashed_password", ""),
        )
        try:
            db.add(user)
            db.commit()
            db.refresh(user)
            return user
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def find_by_id(db: Session, user_id: int) -> User | None:
        return db.get(User, user_id)

    @staticmethod
    def find_by_email(db: Session, email: str) -> User | None:
        return db.query(User).filter(User.email == email.strip().lower()).first()

    @staticmethod
    def find_by_name(db: Session, first_name: str, last_name: str) -> User | None:
        """Case-insensitive lookup by first + last name."""
        return db.query(User).filter(
            func.lower(User.first_name) == first_name.lower(),
            func.lower(User.last_name) == last_name.lower(),
        ).first()

    @staticmethod
    def find_all_users(db: Session) -> list[User]:
        return db.query(User).order_by(User.id).all()

    @staticmethod
    def exists_by_email(db: Session, email: str) -> bool:
        return db.query(User.id).filter(User.email == email.strip().lower()).first() is not None

    @staticmethod
    def is_email_available(db: Session, email: str) -> bool:
        return not UserService.exists_by_email(db, email)

    @staticmethod
    def update_user(db: Session, user_id: int, data: dict) -> User:
        """Update names and/or email. A new email must not belong to anyone else."""
        user = UserService.find_by_id(db, user_id)
        if not user:
            raise NotFoundError(f"User not found with ID: {user_id}")

        new_email = data.get("email")
        if new_email is not None:
            new_email = new_email.strip().lower()
            if new_email != user.email and UserService.exists_by_email(db, new_email):
                raise ConflictError(f"Email {new_email} is already in use")
            user.email = new_email

        for key in ("first_name", "last_name"):
            if data.get(key) is not None:
                setattr(user, key, data[key].strip())

        try:
            db.commit()
            db.refresh(user)
            return user
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def delete_user(db: Session, user_id: int) -> None:
        user = UserService.find_by_id(db, user_id)
        if not user:
            raise NotFoundError(f"User not found with ID: {user_id}")
        try:
            db.delete(user)
            db.commit()
        except Exception:
            db.rollback()
            raise
