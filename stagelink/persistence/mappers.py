"""Mappers for converting between database rows and domain models.

Domain models are immutable pydantic models, so rows are mapped by hand.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from stagelink.domain.model import (
    Account,
    FeaturePermission,
    LinkedIdentity,
    RiskRecord,
    SharedIpUsage,
)
from stagelink.domain.value import AccountId, ProviderKind, RiskRecordId, Role
from stagelink.persistence.tables import LINK_FIELDS, link_column


def row_to_linked_identity(
    row: Dict[str, Any], provider: ProviderKind
) -> Optional[LinkedIdentity]:
    """Linked identity for one provider kind, or None if not linked.

    A kind counts as linked only when both its id and username are present.
    """
    user_id = row.get(link_column(provider, "user_id"))
    username = row.get(link_column(provider, "username"))
    if not user_id or not username:
        return None

    values = {
        "provider_user_id": user_id,
        "username": username,
        "display_name": row.get(link_column(provider, "display_name")),
        "avatar_url": row.get(link_column(provider, "avatar_url")),
    }
    linked_at = row.get(link_column(provider, "linked_at"))
    if linked_at is not None:
        values["linked_at"] = linked_at
    return LinkedIdentity(**values)


def row_to_account(row: Dict[str, Any]) -> Account:
    """Convert database row to Account domain model.

    Unknown stored roles map to the lowest role.
    """
    linked = {}
    for provider in ProviderKind:
        identity = row_to_linked_identity(row, provider)
        if identity is not None:
            linked[provider] = identity

    return Account(
        id=AccountId(row["id"]),
        role=Role.parse(row.get("role")) or Role.lowest(),
        linked_identities=linked,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def link_to_values(provider: ProviderKind, identity: LinkedIdentity) -> Dict[str, Any]:
    """Column values writing every field of one provider link."""
    return {
        link_column(provider, "user_id"): identity.provider_user_id,
        link_column(provider, "username"): identity.username,
        link_column(provider, "display_name"): identity.display_name,
        link_column(provider, "avatar_url"): identity.avatar_url,
        link_column(provider, "linked_at"): identity.linked_at,
    }


def cleared_link_values(provider: ProviderKind) -> Dict[str, Any]:
    """Column values clearing every field of one provider link."""
    return {link_column(provider, field): None for field in LINK_FIELDS}


def account_to_dict(account: Account) -> Dict[str, Any]:
    """Convert Account domain model to database dict."""
    values: Dict[str, Any] = {
        "id": account.id,
        "role": account.role.value,
        "created_at": account.created_at,
        "updated_at": account.updated_at,
    }
    for provider in ProviderKind:
        identity = account.linked(provider)
        if identity is None:
            values.update(cleared_link_values(provider))
        else:
            values.update(link_to_values(provider, identity))
    return values


def row_to_feature_permission(row: Dict[str, Any]) -> FeaturePermission:
    """Convert database row to FeaturePermission domain model.

    Rows naming an unknown role are unlockable by nobody but the top role.
    """
    return FeaturePermission(
        feature_name=row["feature_name"],
        required_role=Role.parse(row["required_role"]) or Role.ADMIN,
        is_enabled=row["is_enabled"],
        description=row.get("description"),
    )


def row_to_risk_record(row: Dict[str, Any]) -> RiskRecord:
    """Convert database row to RiskRecord domain model."""
    return RiskRecord(
        id=RiskRecordId(UUID(row["id"]) if isinstance(row["id"], str) else row["id"]),
        identity_id=row["identity_id"],
        ip_address=row["ip_address"],
        user_agent=row.get("user_agent"),
        is_vpn=row["is_vpn"],
        is_proxy=row["is_proxy"],
        is_tor=row["is_tor"],
        proxy_type=row.get("proxy_type"),
        risk_score=row["risk_score"],
        country_code=row.get("country_code"),
        country_name=row.get("country_name"),
        provider_name=row.get("provider_name"),
        created_at=row["created_at"],
    )


def risk_record_to_dict(record: RiskRecord) -> Dict[str, Any]:
    """Convert RiskRecord domain model to database dict."""
    return record.model_dump()


def row_to_shared_ip_usage(row: Dict[str, Any]) -> SharedIpUsage:
    """Convert one (ip_address, identity_id) aggregate row."""
    return SharedIpUsage(
        identity_id=row["identity_id"],
        first_seen_at=row["first_seen_at"],
        last_seen_at=row["last_seen_at"],
        occurrence_count=row["occurrence_count"],
    )
