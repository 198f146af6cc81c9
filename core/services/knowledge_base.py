# =============================================================================
# core/services/knowledge_base.py - Family Knowledge Base
# =============================================================================
# Builds the plain-text "family data" document the chat assistant reads
# before answering: doctors, schools, allergies, insurance policies, car
# VINs... all curated by the parents in four Notion databases.
#
# Each database becomes a section:
#
#   ## PEOPLE & PROVIDERS
#
#   Name: Dr. Smith
#   Type: Pediatrician
#   Phone: 555-0100
#
#   ---
#
#   Name: ...
#
# Sections are separated by two blank lines. The whole document and the
# family member list are cached in-process for five minutes.
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, NamedTuple

from app.config import settings
from lib.notion import NotionClient, NotionError, extract_property
from lib.utils import TTLCache
from lib.zodiac import get_zodiac_from_birthday

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 5 * 60
RECORD_SEPARATOR = "\n\n---\n\n"
SECTION_SEPARATOR = "\n\n\n"


class Section(NamedTuple):
    """A Notion database rendered as one section of the document."""
    heading: str
    settings_key: str
    # (Notion property name, label written in the document)
    fields: list[tuple[str, str]]


SECTIONS: list[Section] = [
    Section(
        heading="## PEOPLE & PROVIDERS",
        settings_key="NOTION_PEOPLE_DB_ID",
        fields=[
            ("Type", "Type"),
            ("Family Member", "Family Members"),
            ("Organization / School / Practice", "Organization"),
            ("Phone", "Phone"),
            ("Email", "Email"),
            ("Location", "Location"),
            ("Notes", "Notes"),
            ("Website", "Website"),
        ],
    ),
    Section(
        heading="## FAMILY HEALTH INFO",
        settings_key="NOTION_HEALTH_DB_ID",
        fields=[
            ("Family Role", "Role"),
            ("Age (Y/M/D)", "Age"),
            ("Birthday", "Birthday"),
            ("Blood Type", "Blood Type"),
            ("Allergies", "Allergies"),
            ("Medications", "Medications"),
            ("Chronic Conditions", "Chronic Conditions"),
            ("Primary Doctors", "Primary Doctors"),
            ("Patient Portal Link", "Patient Portal"),
            ("Emergency Notes", "Emergency Notes"),
        ],
    ),
    Section(
        heading="## ASSETS & PROPERTIES",
        settings_key="NOTION_ASSETS_DB_ID",
        fields=[
            ("Type", "Type"),
            ("Identifier (VIN / Serial / ID)", "ID/VIN/Serial"),
            ("Purchase / Move-in Date", "Purchase/Move-in Date"),
            ("Related Accounts", "Related Accounts"),
            ("Notes", "Notes"),
        ],
    ),
    Section(
        heading="## ACCOUNTS & POLICIES",
        settings_key="NOTION_ACCOUNTS_DB_ID",
        fields=[
            ("Category", "Category"),
            ("Institution / Company", "Company"),
            ("Owner", "Owner"),
            ("Status", "Status"),
            ("Primary Portal / Site", "Portal/Website"),
            ("Monthly / Annual Cost", "Cost"),
            ("Renewal / Due Date", "Renewal Date"),
            ("Related Asset", "Related Asset"),
            ("Notes", "Notes"),
        ],
    ),
]

# Health database columns exposed on the family page
MEMBER_FIELDS: dict[str, str] = {
    "role": "Family Role",
    "age": "Age (Y/M/D)",
    "birthday": "Birthday",
    "blood_type": "Blood Type",
    "allergies": "Allergies",
    "medications": "Medications",
    "conditions": "Chronic Conditions",
    "doctors": "Primary Doctors",
    "patient_portal": "Patient Portal Link",
    "emergency_notes": "Emergency Notes",
    "school": "School / Grade",
    "teachers": "Teachers",
    "activities": "Activities & Interests",
}

_document_cache: TTLCache[str] = TTLCache(ttl_seconds=CACHE_TTL_SECONDS)
_members_cache: TTLCache[list[dict[str, Any]]] = TTLCache(ttl_seconds=CACHE_TTL_SECONDS)


def format_record(properties: dict[str, Any], fields: list[tuple[str, str]]) -> str:
    """
    Render one Notion row as "Label: value" lines.

    Name always comes first ("Unknown" when blank); empty fields are skipped.
    """
    lines = [f"Name: {extract_property(properties.get('Name')) or 'Unknown'}"]
    for prop_name, label in fields:
        value = extract_property(properties.get(prop_name))
        if value:
            lines.append(f"{label}: {value}")
    return "\n".join(lines)


def format_section(section: Section, pages: list[dict[str, Any]]) -> str:
    """Heading plus records; empty string when there are no records."""
    if not pages:
        return ""
    records = [format_record(page.get("properties", {}), section.fields) for page in pages]
    return f"{section.heading}\n\n{RECORD_SEPARATOR.join(records)}"


class KnowledgeBaseService:
    """
    Service for the Notion-backed family knowledge base.

    All methods are static; caches are module-level.
    """

    @staticmethod
    def _fetch_section(section: Section) -> str:
        database_id = getattr(settings, section.settings_key)
        if not database_id:
            return ""

        try:
            pages = NotionClient.query_database(database_id)
        except NotionError as e:
            logger.error(f"Knowledge base section '{section.heading}' unavailable: {e}")
            return ""

        return format_section(section, pages)

    @staticmethod
    def _build_document() -> str:
        sections = [KnowledgeBaseService._fetch_section(section) for section in SECTIONS]
        document = SECTION_SEPARATOR.join(s for s in sections if s)
        logger.info(f"Built family knowledge base ({len(document)} chars)")
        return document

    @staticmethod
    def fetch_all_family_data() -> str:
        """
        Get the full knowledge base document (cached for 5 minutes).

        Returns an empty string when Notion is not configured; a failing
        database contributes an empty section instead of failing the whole
        document.
        """
        if not settings.NOTION_API_KEY:
            return ""
        return _document_cache.get_or_load(KnowledgeBaseService._build_document)

    @staticmethod
    def is_cached() -> bool:
        return _document_cache.is_fresh()

    @staticmethod
    def invalidate_cache() -> None:
        """Force the next read to go back to Notion."""
        _document_cache.clear()
        _members_cache.clear()
        logger.debug("Knowledge base cache invalidated")

    @staticmethod
    def fetch_family_members() -> list[dict[str, Any]]:
        """
        Get family members from the health database (cached for 5 minutes).

        Each member has id, name, the MEMBER_FIELDS values and, when the
        birthday is known, a zodiac dict.

        Raises:
            NotionError: If Notion or the health database isn't configured,
                or the query fails
        """
        cached = _members_cache.get()
        if cached is not None:
            return cached

        if not settings.NOTION_HEALTH_DB_ID:
            raise NotionError(
                message="Family health database is not configured",
                code="NOTION_NOT_CONFIGURED",
                suggestion="Set NOTION_HEALTH_DB_ID in your .env file",
            )

        pages = NotionClient.query_database(settings.NOTION_HEALTH_DB_ID)

        members = []
        for page in pages:
            properties = page.get("properties", {})
            member: dict[str, Any] = {
                "id": page.get("id"),
                "name": extract_property(properties.get("Name")) or "Unknown",
            }
            for key, prop_name in MEMBER_FIELDS.items():
                member[key] = extract_property(properties.get(prop_name))
            member["zodiac"] = get_zodiac_from_birthday(member["birthday"])
            members.append(member)

        _members_cache.set(members)
        logger.info(f"Fetched {len(members)} family members from Notion")
        return members
