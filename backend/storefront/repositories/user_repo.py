from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.models.user import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_or_create(self, email: str, name: Optional[str] = None) -> User:
        """
        Find the user by email or create it. A concurrent first sign-in for the
        same email loses on the unique constraint and re-reads.
        """
        user = self.get_by_email(email)
        if user:
            return user
        try:
            with self.db.begin_nested():
                user = User(email=email, name=name or email.split("@")[0])
                self.db.add(user)
            return user
        except IntegrityError:
            return self.get_by_email(email)
