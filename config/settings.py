# config/settings.py

"""
Configuration store for the insights API.
Values live in the `config` table under the `idp_insights.settings`
collection. There are no defaults: an unset api_key means every request
fails authentication.
"""

import logging
from typing import Optional

from models import ConfigEntry

logger = logging.getLogger(__name__)

SETTINGS_COLLECTION = "idp_insights.settings"
API_KEY = "api_key"


class SettingsStore:
    """Read/write access to one configuration collection."""

    def __init__(self, session_factory, collection: str = SETTINGS_COLLECTION):
        self._session_factory = session_factory
        self.collection = collection

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when unset"""
        session = self._session_factory()
        try:
            entry = session.get(ConfigEntry, (self.collection, key))
            return entry.value if entry else None
        finally:
            session.close()

    def set(self, key: str, value: Optional[str]) -> None:
        session = self._session_factory()
        try:
            entry = session.get(ConfigEntry, (self.collection, key))
            if entry is None:
                entry = ConfigEntry(collection=self.collection, name=key)
                session.add(entry)
            entry.value = value
            session.commit()
            logger.info("Setting %s:%s updated", self.collection, key)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def read_only(self) -> "ReadOnlySettings":
        return ReadOnlySettings(self)


class ReadOnlySettings:
    """Lookup-only view handed to request-serving code."""

    def __init__(self, store: SettingsStore):
        self._store = store

    def get(self, key: str) -> Optional[str]:
        return self._store.get(key)
