"""Candidate qualification against company, role and price."""

from .engine import QualificationEngine
from .role_synonyms import DEFAULT_ROLE_SYNONYMS, RoleSynonymTable

__all__ = ["DEFAULT_ROLE_SYNONYMS", "QualificationEngine", "RoleSynonymTable"]
