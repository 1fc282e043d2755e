"""
SQLAlchemy models: the slice of the platform data store the insight
reports read, plus the configuration store holding the API key.
"""

from sqlalchemy import (
    String,
    Boolean,
    Integer,
    ForeignKey,
    Column,
    Text,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column

from db import Base


class Extension(Base):
    __tablename__ = "extensions"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    version: Mapped[str | None] = mapped_column(String(64), nullable=True)
    origin: Mapped[str] = mapped_column(String(32), nullable=False, default="contrib")
    obsolete: Mapped[bool] = mapped_column(Boolean, default=False)
    installed: Mapped[bool] = mapped_column(Boolean, default=False)

    def __repr__(self):
        return (
            f"<Extension key={self.key!r} origin={self.origin!r} "
            f"installed={self.installed}>"
        )


class ContentType(Base):
    __tablename__ = "content_types"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    label: Mapped[str] = mapped_column(String(255), nullable=False)


class Node(Base):
    __tablename__ = "nodes"

    nid = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(32), ForeignKey("content_types.id"), nullable=False)
    title = Column(String(255), nullable=False, default="")

    __table_args__ = (
        Index("ix_nodes_type", "type"),
    )


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    weight: Mapped[int] = mapped_column(Integer, default=0)


class User(Base):
    __tablename__ = "users"

    uid = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(60), nullable=False, unique=True)


class UserRole(Base):
    __tablename__ = "user_roles"

    uid = Column(Integer, ForeignKey("users.uid"), primary_key=True)
    role_id = Column(String(32), ForeignKey("roles.id"), primary_key=True)

    __table_args__ = (
        Index("ix_user_roles_role", "role_id"),
    )


class Vocabulary(Base):
    __tablename__ = "vocabularies"

    vid: Mapped[str] = mapped_column(String(32), primary_key=True)
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    weight: Mapped[int] = mapped_column(Integer, default=0)


class Term(Base):
    __tablename__ = "terms"

    tid = Column(Integer, primary_key=True, autoincrement=True)
    vid = Column(String(32), ForeignKey("vocabularies.vid"), nullable=False)
    name = Column(String(255), nullable=False)

    __table_args__ = (
        Index("ix_terms_vid", "vid"),
    )


class SystemRequirement(Base):
    """One row per status-report component (drupal, cron, php, ...)."""

    __tablename__ = "system_requirements"

    component: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")


class ConfigEntry(Base):
    __tablename__ = "config"

    collection: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self):
        return f"<ConfigEntry {self.collection}:{self.name}>"
