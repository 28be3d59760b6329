# app/models/user.py

import enum
from datetime import datetime, date, UTC
from sqlalchemy import Column, ForeignKey, Integer, String, DateTime, Date, Enum, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship
from infrastructure.postgres_connection import Base


class UserStatus(str, enum.Enum):
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"


# Pending friend requests: requester -> recipient
user_friend_requests = Table(
    "user_friend_requests",
    Base.metadata,
    Column("recipient_id", Integer, ForeignKey("users.id"), primary_key=True),
    Column("requester_id", Integer, ForeignKey("users.id"), primary_key=True),
)

user_friends = Table(
    "user_friends",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id"), primary_key=True),
    Column("friend_id", Integer, ForeignKey("users.id"), primary_key=True),
)


class User(Base):
    """
    Player account.

    Lobbies never embed users, they only keep the ``id`` of each member and
    resolve it against this table when needed.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    token: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True, index=True)
    status: Mapped[UserStatus] = mapped_column(Enum(UserStatus), nullable=False, default=UserStatus.OFFLINE)
    # Stored as given, hashing happens in the auth layer
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    creation_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )
    birthday: Mapped[date | None] = mapped_column(Date, nullable=True)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    friend_requests: Mapped[set["User"]] = relationship(
        "User",
        secondary=user_friend_requests,
        primaryjoin=lambda: User.id == user_friend_requests.c.recipient_id,
        secondaryjoin=lambda: User.id == user_friend_requests.c.requester_id,
        collection_class=set,
        lazy="selectin",
    )
    friends: Mapped[set["User"]] = relationship(
        "User",
        secondary=user_friends,
        primaryjoin=lambda: User.id == user_friends.c.user_id,
        secondaryjoin=lambda: User.id == user_friends.c.friend_id,
        collection_class=set,
        lazy="selectin",
    )

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', status={self.status.value if self.status else None})>"
