"""Decide whether an expert qualifies for booking."""

from typing import Optional

from loguru import logger

from ...core.enums import SkipReason
from ...models.booking import QualificationResult
from ...models.expert import CandidateIdentity, ExpertProfile
from .role_synonyms import RoleSynonymTable


class QualificationEngine:
    """Match profile text against company and role, then filter services by price and type."""

    def __init__(self, role_synonyms: Optional[RoleSynonymTable] = None):
        self.role_synonyms = role_synonyms or RoleSynonymTable()

    def matches_company(self, profile: ExpertProfile, target_company: str) -> bool:
        company = target_company.strip().lower()
        return bool(company) and company in profile.searchable_text.lower()

    def matches_role(self, profile: ExpertProfile, target_role: str) -> bool:
        text = profile.searchable_text.lower()
        return any(v in text for v in self.role_synonyms.variations(target_role))

    def qualify(
        self,
        profile: ExpertProfile,
        target_company: str,
        target_role: str,
        max_price: float,
        candidate: Optional[CandidateIdentity] = None,
    ) -> QualificationResult:
        """
        Qualify a profile.

        Args:
            profile: Expert profile from the marketplace API
            target_company: Company that must appear in the profile text
            target_role: Role that must appear (synonyms allowed)
            max_price: Highest acceptable price, inclusive
            candidate: Search result the profile was fetched for

        Returns:
            QualificationResult with live, affordable services in profile order
        """
        candidate = candidate or CandidateIdentity(
            username=profile.username, display_name=profile.full_name, profile_url=""
        )

        company_ok = self.matches_company(profile, target_company)
        role_ok = self.matches_role(profile, target_role)
        if not (company_ok and role_ok):
            logger.info(
                f"@{profile.username} does not match criteria "
                f"(company: {company_ok}, role: {role_ok})"
            )
            return QualificationResult(
                candidate=candidate, criteria_matched=False, reason=SkipReason.CRITERIA_MISMATCH
            )

        services = tuple(
            s for s in profile.services if s.price.amount <= max_price and s.is_live_session
        )
        if not services:
            logger.info(f"@{profile.username} matches criteria but has no affordable live service")
            return QualificationResult(
                candidate=candidate,
                criteria_matched=True,
                reason=SkipReason.NO_AFFORDABLE_LIVE_SERVICE,
            )

        logger.info(f"@{profile.username} qualifies with {len(services)} service(s)")
        return QualificationResult(
            candidate=candidate, qualifying_services=services, criteria_matched=True
        )
