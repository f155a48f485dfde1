"""
User model for account registration and authentication.
"""

from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from property_manager.database import Base
from property_manager.utils.auth import hash_password, verify_password


class User(Base):
    """
    Registered user of the property-management application.
    Email uniqueness is enforced by a unique index, not only by the signup lookup.
    """

    __tablename__ = "users"

    full_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
        comment="User's full name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - must be unique"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    receive_emails: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether the user opted in to emails"
    )

    def __repr__(self) -> str:
        """String representation of the user."""
        return f"<User(id={self.id}, email={self.email})>"

    def verify_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""
        return verify_password(password, self.hashed_password)

    def set_password(self, password: str) -> None:
        """Set a new password for the user."""
        self.hashed_password = hash_password(password)

    def to_dict(self) -> dict:
        """
        Convert user to dictionary (excluding the password hash).

        Returns:
            Dictionary representation of user using the API field names
        """
        return {
            "id": str(self.id),
            "fullName": self.full_name,
            "email": self.email,
            "receiveEmails": self.receive_emails,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
