# shopflow/repositories/user_repo.py
import uuid

from sqlmodel import Session, select

from shopflow.models.user import User


class UserRepository:
    """
    Data access layer for User (catalog actors).

    - Pure DB operations, no FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        return session.exec(stmt).first()

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
