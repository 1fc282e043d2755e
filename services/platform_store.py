"""
services/platform_store.py
SQLAlchemy-backed reads of the platform data the insight reports need.
Every call opens its own session and returns plain dicts/sets/ints, so the
aggregator never holds ORM objects past a session's lifetime.
Errors propagate; InsightService decides how to surface them.
"""

import logging

from sqlalchemy import func, select

from models import (
    ContentType,
    Extension,
    Node,
    Role,
    SystemRequirement,
    Term,
    UserRole,
    Vocabulary,
)

logger = logging.getLogger(__name__)


class PlatformStore:
    """
    Implements every collaborator interface the aggregator depends on:
    extension catalog, installed extensions, content types and entities,
    requirements status, roles and assignments, vocabularies and terms.
    """

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def _rows(self, stmt):
        session = self._session_factory()
        try:
            return session.execute(stmt).all()
        finally:
            session.close()

    def _count(self, stmt):
        session = self._session_factory()
        try:
            return int(session.execute(stmt).scalar() or 0)
        finally:
            session.close()

    # ── Extensions ────────────────────────────────────────────

    def list_extensions(self):
        rows = self._rows(
            select(
                Extension.key,
                Extension.name,
                Extension.version,
                Extension.origin,
                Extension.obsolete,
            ).order_by(Extension.key)
        )
        return [
            {
                "key": r.key,
                "name": r.name,
                "version": r.version,
                "origin": r.origin,
                "obsolete": bool(r.obsolete),
            }
            for r in rows
        ]

    def installed_extensions(self):
        rows = self._rows(select(Extension.key).where(Extension.installed.is_(True)))
        return {r.key for r in rows}

    # ── Content ───────────────────────────────────────────────

    def list_content_types(self):
        rows = self._rows(select(ContentType.id, ContentType.label).order_by(ContentType.id))
        return [{"id": r.id, "label": r.label} for r in rows]

    def count_nodes_by_type(self, type_id):
        # Totals across all nodes; no viewer-scoped access filtering.
        return self._count(select(func.count(Node.nid)).where(Node.type == type_id))

    # ── Status report ─────────────────────────────────────────

    def requirements(self):
        rows = self._rows(select(SystemRequirement.component, SystemRequirement.value))
        return {r.component: {"value": r.value} for r in rows}

    # ── Roles ─────────────────────────────────────────────────

    def list_roles(self):
        rows = self._rows(select(Role.id, Role.label).order_by(Role.weight, Role.id))
        return [{"id": r.id, "label": r.label} for r in rows]

    def count_users_by_role(self, role_id):
        return self._count(
            select(func.count(func.distinct(UserRole.uid))).where(UserRole.role_id == role_id)
        )

    # ── Taxonomy ──────────────────────────────────────────────

    def list_vocabularies(self):
        rows = self._rows(
            select(Vocabulary.vid, Vocabulary.label).order_by(Vocabulary.weight, Vocabulary.vid)
        )
        return [{"id": r.vid, "label": r.label} for r in rows]

    def count_terms_by_vocabulary(self, vid):
        return self._count(select(func.count(Term.tid)).where(Term.vid == vid))
