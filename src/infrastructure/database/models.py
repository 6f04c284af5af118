"""SQLAlchemy ORM models.

Each table mirrors one document collection. Timestamps are epoch
milliseconds to match the values clients send and display.
"""

from uuid import UUID, uuid4

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from core.clock import now_ms


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """User profile keyed by the auth provider uid."""

    __tablename__ = "profiles"

    uid: Mapped[str] = mapped_column(String(128), primary_key=True)
    username: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    full_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    avatar: Mapped[str | None] = mapped_column(String(500))
    bio: Mapped[str | None] = mapped_column(Text)
    premium_status: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[int] = mapped_column(BigInteger, default=now_ms, nullable=False)
    last_active: Mapped[int | None] = mapped_column(BigInteger)
    last_username_change: Mapped[int | None] = mapped_column(BigInteger)

    device_tokens: Mapped[list["DeviceTokenModel"]] = relationship(
        "DeviceTokenModel",
        back_populates="profile",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("ix_profiles_created_at", "created_at"),)


class UsernameClaimModel(Base):
    """Username index document: the primary key is the normalized name.

    Inserted conditionally, so the store itself rejects a second claim.
    """

    __tablename__ = "usernames"

    username: Mapped[str] = mapped_column(String(30), primary_key=True)
    uid: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    claimed_at: Mapped[int] = mapped_column(BigInteger, default=now_ms, nullable=False)


class DeviceTokenModel(Base):
    """Opaque push token registered by a user's device."""

    __tablename__ = "device_tokens"

    uid: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("profiles.uid", ondelete="CASCADE"),
        primary_key=True,
    )
    token: Mapped[str] = mapped_column(String(512), primary_key=True)
    created_at: Mapped[int] = mapped_column(BigInteger, default=now_ms, nullable=False)

    profile: Mapped["ProfileModel"] = relationship("ProfileModel", back_populates="device_tokens")


class QuestionModel(Base):
    """Anonymous question. No foreign key on receiver: orphans are allowed."""

    __tablename__ = "questions"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    receiver_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    sender_id: Mapped[str | None] = mapped_column(String(128))
    text: Mapped[str] = mapped_column(Text, nullable=False)
    theme: Mapped[str] = mapped_column(String(50), nullable=False, default="default")
    is_answered: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_ms)


class AnswerModel(Base):
    """Published answer with denormalized author snapshot columns."""

    __tablename__ = "answers"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    # Not unique: one answer per question is kept by the publish protocol
    question_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    answer_text: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_ms)
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    author_username: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    author_avatar: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    author_full_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    liked_by: Mapped[list["AnswerLikeModel"]] = relationship(
        "AnswerLikeModel",
        back_populates="answer",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("likes >= 0", name="ck_answers_likes_non_negative"),
        Index("ix_answers_public_timestamp", "is_public", "timestamp"),
    )


class AnswerLikeModel(Base):
    """Membership row of an answer's ``liked_by`` set."""

    __tablename__ = "answer_likes"

    answer_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("answers.id", ondelete="CASCADE"),
        primary_key=True,
    )
    viewer_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_ms)

    answer: Mapped["AnswerModel"] = relationship("AnswerModel", back_populates="liked_by")
