"""Role synonym expansion used when matching expert profiles."""

from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

import yaml
from loguru import logger

from ...core.exceptions import ConfigurationError

DEFAULT_ROLE_SYNONYMS: Mapping[str, Tuple[str, ...]] = {
    "product manager": ("product manager", "pm", "product lead", "product owner"),
    "software engineer": ("software engineer", "swe", "developer", "programmer", "engineer"),
    "designer": ("designer", "ux designer", "ui designer", "product designer"),
    "data scientist": ("data scientist", "data analyst", "ml engineer", "data engineer"),
    "marketing": ("marketing", "marketer", "growth", "marketing manager"),
}


def _normalize(text: str) -> str:
    return " ".join(text.lower().split())


class RoleSynonymTable:
    """
    Map a requested role to the phrases that count as that role on a profile.

    Lookup order for a requested role:
        1. the role is a table key
        2. the role equals a listed variation of some key
        3. a table key appears inside the role ("senior product manager")
        4. the literal role alone
    """

    def __init__(self, table: Optional[Mapping[str, Iterable[str]]] = None):
        self._table: Dict[str, List[str]] = {}
        for role, variations in (DEFAULT_ROLE_SYNONYMS if table is None else table).items():
            self.extend(role, variations)

    def extend(self, role: str, variations: Iterable[str]) -> None:
        """
        Add variations for a role, creating the role if needed.

        The role itself is always one of its own variations.
        """
        key = _normalize(role)
        if not key:
            raise ValueError("Role name must not be empty")
        existing = self._table.setdefault(key, [key])
        for variation in variations:
            normalized = _normalize(variation)
            if normalized and normalized not in existing:
                existing.append(normalized)

    def variations(self, role: str) -> List[str]:
        """Return the lowercase phrases that count as ``role``."""
        wanted = _normalize(role)
        if not wanted:
            return []

        if wanted in self._table:
            return list(self._table[wanted])

        for variations in self._table.values():
            if wanted in variations:
                return list(variations)

        for key, variations in self._table.items():
            if key in wanted:
                return list(variations)

        return [wanted]

    def roles(self) -> List[str]:
        return list(self._table)

    @classmethod
    def from_yaml(cls, path: Union[str, Path], include_defaults: bool = True) -> "RoleSynonymTable":
        """
        Load extra synonyms from a YAML file.

        Expected format::

            role_synonyms:
              product manager: [apm, group product manager]
              recruiter: [talent partner, sourcer]

        Args:
            path: YAML file path
            include_defaults: Start from the built-in table

        Raises:
            ConfigurationError: If the file is missing or malformed
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Role synonyms file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in role synonyms file {path}: {e}") from e

        entries = data.get("role_synonyms", data) if isinstance(data, dict) else None
        if not isinstance(entries, dict):
            raise ConfigurationError(
                f"Role synonyms file {path} must map role names to lists of variations"
            )

        table = cls() if include_defaults else cls(table={})
        for role, variations in entries.items():
            if isinstance(variations, str):
                variations = [variations]
            if not isinstance(variations, list):
                raise ConfigurationError(f"Variations for role '{role}' must be a list")
            table.extend(str(role), [str(v) for v in variations])

        logger.info(f"Loaded {len(entries)} role synonym entries from {path}")
        return table
