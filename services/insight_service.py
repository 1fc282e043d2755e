"""
services/insight_service.py
Insight aggregator: one handler per report kind.
Reads live collaborator state on every call. No caching, no HTTP knowledge.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

# Built-in roles every account holds implicitly; never reported.
EXCLUDED_ROLES = ("anonymous", "authenticated")

CORE_ORIGIN = "core"
MISSING_VERSION = "NA"


class ReportName(Enum):
    """Closed set of reports a caller may request (case-sensitive)."""
    MODULES = "Modules"
    CONTENT_TYPES = "ContentTypes"
    METADATA = "Metadata"
    ROLES_USERS = "RolesUsers"
    TAXONOMY_COUNT = "TaxonomyCount"


@dataclass(frozen=True)
class ReportResult:
    """Either an ok payload or an error message, never both."""
    payload: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, payload: Any) -> "ReportResult":
        return cls(payload=payload)

    @classmethod
    def failure(cls, message: str) -> "ReportResult":
        return cls(error=message)


def _first_token(raw: Optional[str], sep: str) -> Optional[str]:
    """Text before the first separator; the whole string when absent."""
    if raw is None:
        return None
    return raw.split(sep, 1)[0]


class InsightService:
    """
    Aggregates platform data into flat report rows.

    `store` provides:
        list_extensions(), installed_extensions(),
        list_content_types(), count_nodes_by_type(id),
        requirements(),
        list_roles(), count_users_by_role(id),
        list_vocabularies(), count_terms_by_vocabulary(id)
    """

    def __init__(self, store):
        self.store = store
        self._registry: Mapping[str, Callable[[], Any]] = MappingProxyType({
            ReportName.MODULES.value: self.get_modules,
            ReportName.CONTENT_TYPES.value: self.get_content_types,
            ReportName.METADATA.value: self.get_metadata,
            ReportName.ROLES_USERS.value: self.get_roles_users,
            ReportName.TAXONOMY_COUNT.value: self.get_taxonomy_count,
        })

    @property
    def registry(self) -> Mapping[str, Callable[[], Any]]:
        return self._registry

    def has_report(self, name: str) -> bool:
        return name in self._registry

    def run_report(self, name: str) -> ReportResult:
        """
        Resolve `name` through the registry and execute it.
        Unknown names and collaborator failures both come back as failures;
        nothing is raised to the caller.
        """
        handler = self._registry.get(name)
        if handler is None:
            return ReportResult.failure("Unknown report")
        try:
            return ReportResult.success(handler())
        except Exception as e:
            logger.error("Insight report %s failed: %s", name, e, exc_info=True)
            return ReportResult.failure("Report failed")

    # ── Handlers ──────────────────────────────────────────────

    def get_modules(self) -> List[Dict[str, str]]:
        installed = self.store.installed_extensions()
        modules = [
            m for m in self.store.list_extensions()
            if not m["obsolete"] and m["origin"] != CORE_ORIGIN
        ]
        return [
            {
                "name": m["key"],
                "title": m["name"],
                "version": m.get("version") or MISSING_VERSION,
                "installed": "Yes" if m["key"] in installed else "No",
            }
            for m in modules
        ]

    def get_content_types(self) -> List[Dict[str, Any]]:
        results = []
        for content_type in self.store.list_content_types():
            type_id = content_type["id"]
            results.append({
                "name": type_id,
                "title": content_type["label"],
                "node_count": self.store.count_nodes_by_type(type_id),
            })
        return results

    def get_metadata(self) -> Dict[str, Optional[str]]:
        requirements = self.store.requirements()

        def value(component):
            return (requirements.get(component) or {}).get("value")

        return {
            "drupal_version": value("drupal"),
            "cron_run": value("cron"),
            # "8.1.0 (cli)" -> "8.1.0"
            "php": _first_token(value("php"), " "),
            "database": value("database_system"),
            # "8.0-ubuntu0.22.04" -> "8.0"
            "database_version": _first_token(value("database_system_version"), "-"),
            "webserver": value("webserver"),
        }

    def get_roles_users(self) -> List[Dict[str, Any]]:
        result = []
        for role in self.store.list_roles():
            role_id = role["id"]
            if role_id in EXCLUDED_ROLES:
                continue
            result.append({
                "role_name": role["label"],
                "role_id": role_id,
                "user_count": self.store.count_users_by_role(role_id),
            })
        return result

    def get_taxonomy_count(self) -> List[Dict[str, Any]]:
        result = []
        for vocabulary in self.store.list_vocabularies():
            vid = vocabulary["id"]
            result.append({
                "title": vocabulary["label"],
                "name": vid,
                "term_count": self.store.count_terms_by_vocabulary(vid),
            })
        return result
