"""
Admin domain — action dispatch and response shaping.

``ACTION_REGISTRY`` is the whitelist: an action type that is not a key here
cannot reach any handler.  Each entry pairs the handler with the schema that
validates its input, so no handler runs on unvalidated data.
"""
from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shared.models.pagination import PageRequest, Pagination
from shared.models.user import CurrentUser

from app.admin import moderation
from app.admin import service as svc
from app.admin.enrichment import (
    ENRICHMENT_BATCH_SIZE,
    EmailResolver,
    load_vehicle_refs,
    maker_model_for,
    registration_for,
)
from app.admin.schemas import (
    ActivityItem,
    ClaimItem,
    EmptyRequest,
    ListingItem,
    OverviewResponse,
    SetVehicleVerificationRequest,
    SuspendUserRequest,
    TransferItem,
    UnsuspendUserRequest,
    UpdateClaimStatusRequest,
    UpdateListingStatusRequest,
    UserItem,
    VehicleForClaimRequest,
    VehicleForClaimResponse,
    VehicleItem,
)
from app.exceptions import InvalidAction, InvalidJSON, UnknownAction, ValidationFailed
from app.identity.client import IdentityProvider

logger = logging.getLogger(__name__)

Payload = dict[str, Any]


class ActionType(str, Enum):
    OVERVIEW = "overview"
    USERS = "users"
    ACTIVITY = "activity"
    VEHICLES = "vehicles"
    TRANSFERS = "transfers"
    CLAIMS = "claims"
    LISTINGS = "listings"
    SUSPEND_USER = "suspend_user"
    UNSUSPEND_USER = "unsuspend_user"
    SET_VEHICLE_VERIFICATION = "set_vehicle_verification"
    GET_VEHICLE_FOR_CLAIM = "get_vehicle_for_claim"
    UPDATE_CLAIM_STATUS = "update_claim_status"
    UPDATE_LISTING_STATUS = "update_listing_status"


@dataclass
class ActionContext:
    """Request-scoped collaborators handed to every handler."""

    session: AsyncSession
    session_factory: async_sessionmaker[AsyncSession]
    identity: IdentityProvider
    admin: CurrentUser
    request_id: str | None = None
    batch_size: int = ENRICHMENT_BATCH_SIZE

    def email_resolver(self) -> EmailResolver:
        return EmailResolver(self.identity, self.batch_size)


Handler = Callable[[ActionContext, Any], Awaitable[Payload]]


@dataclass(frozen=True)
class Action:
    schema: type[BaseModel]
    handler: Handler


def _dump(model: BaseModel) -> Payload:
    return model.model_dump(mode="json", by_alias=True)


def _columns(obj: Any) -> Payload:
    """ORM row → {attribute: value} for every mapped column."""
    return {attr.key: getattr(obj, attr.key) for attr in inspect(obj).mapper.column_attrs}


def _paged(key: str, items: list[Payload], params: PageRequest, total: int) -> Payload:
    return {key: items, "pagination": _dump(Pagination.build(params, total))}


# ── Read handlers ─────────────────────────────────────────────────────────────

async def _overview(ctx: ActionContext, params: EmptyRequest) -> Payload:
    counts = await svc.get_overview(ctx.session_factory)
    return _dump(OverviewResponse(**counts))


async def _users(ctx: ActionContext, params: PageRequest) -> Payload:
    owners, total = await svc.list_users(ctx.session, params)
    user_ids = [o.user_id for o in owners]
    doc_counts = await svc.get_document_counts(ctx.session, user_ids)
    suspensions = await svc.get_suspensions(ctx.session, user_ids)
    emails = ctx.email_resolver()
    await emails.resolve(user_ids)

    items = []
    for owner in owners:
        suspension = suspensions.get(owner.user_id)
        items.append(
            _dump(
                UserItem(
                    user_id=owner.user_id,
                    email=emails.email_for(owner.user_id),
                    vehicle_count=owner.vehicle_count,
                    document_count=doc_counts.get(owner.user_id, 0),
                    join_date=owner.join_date,
                    is_suspended=suspension is not None,
                    suspended_at=suspension.suspended_at if suspension else None,
                    suspension_reason=suspension.reason if suspension else None,
                )
            )
        )
    return _paged("users", items, params, total)


async def _vehicles(ctx: ActionContext, params: PageRequest) -> Payload:
    vehicles, total = await svc.list_vehicles(ctx.session, params)
    emails = ctx.email_resolver()
    await emails.resolve(v.user_id for v in vehicles)
    items = [
        _dump(VehicleItem(**_columns(v), user_email=emails.email_for(v.user_id)))
        for v in vehicles
    ]
    return _paged("vehicles", items, params, total)


async def _activity(ctx: ActionContext, params: PageRequest) -> Payload:
    events, total = await svc.list_activity(ctx.session, params)
    refs = await load_vehicle_refs(ctx.session, (e.vehicle_id for e in events))
    emails = ctx.email_resolver()
    await emails.resolve(e.user_id for e in events)
    items = [
        _dump(
            ActivityItem(
                **_columns(e),
                user_email=emails.email_for(e.user_id),
                registration_number=registration_for(refs, e.vehicle_id),
            )
        )
        for e in events
    ]
    return _paged("activity", items, params, total)


async def _transfers(ctx: ActionContext, params: PageRequest) -> Payload:
    transfers, total = await svc.list_transfers(ctx.session, params)
    refs = await load_vehicle_refs(ctx.session, (t.vehicle_id for t in transfers))
    emails = ctx.email_resolver()
    await emails.resolve(t.sender_id for t in transfers)
    items = [
        _dump(
            TransferItem(
                **_columns(t),
                sender_email=emails.email_for(t.sender_id),
                registration_number=registration_for(refs, t.vehicle_id),
                maker_model=maker_model_for(refs, t.vehicle_id),
            )
        )
        for t in transfers
    ]
    return _paged("transfers", items, params, total)


async def _claims(ctx: ActionContext, params: PageRequest) -> Payload:
    claims, total = await svc.list_claims(ctx.session, params)
    refs = await load_vehicle_refs(ctx.session, (c.vehicle_id for c in claims))
    emails = ctx.email_resolver()
    await emails.resolve([c.claimant_id for c in claims] + [c.current_owner_id for c in claims])
    items = [
        _dump(
            ClaimItem(
                **_columns(c),
                claimant_email_display=emails.email_for(c.claimant_id, fallback=c.claimant_email),
                owner_email=emails.email_for(c.current_owner_id),
                maker_model=maker_model_for(refs, c.vehicle_id),
            )
        )
        for c in claims
    ]
    return _paged("claims", items, params, total)


async def _listings(ctx: ActionContext, params: PageRequest) -> Payload:
    listings, total = await svc.list_listings(ctx.session, params)
    refs = await load_vehicle_refs(ctx.session, (item.vehicle_id for item in listings))
    emails = ctx.email_resolver()
    await emails.resolve(item.user_id for item in listings)
    items = []
    for listing in listings:
        ref = refs.get(listing.vehicle_id)
        items.append(
            _dump(
                ListingItem(
                    **_columns(listing),
                    user_email=emails.email_for(listing.user_id),
                    registration_number=registration_for(refs, listing.vehicle_id),
                    maker_model=ref.maker_model if ref else None,
                    manufacturer=ref.manufacturer if ref else None,
                )
            )
        )
    return _paged("listings", items, params, total)


async def _vehicle_for_claim(ctx: ActionContext, params: VehicleForClaimRequest) -> Payload:
    vehicle = await svc.find_vehicle_by_registration(ctx.session, params.registration_number)
    if vehicle is None:
        return {"found": False}
    return _dump(
        VehicleForClaimResponse(
            found=True,
            vehicle_id=vehicle.id,
            owner_id=vehicle.user_id,
            maker_model=vehicle.maker_model,
        )
    )


# ── Moderation handlers ───────────────────────────────────────────────────────

async def _suspend_user(ctx: ActionContext, params: SuspendUserRequest) -> Payload:
    await moderation.suspend_user(ctx.session, ctx.admin, params.user_id, params.reason)
    logger.info("[%s] %s suspended user %s", ctx.request_id, ctx.admin.email, params.user_id)
    return {"message": "User suspended"}


async def _unsuspend_user(ctx: ActionContext, params: UnsuspendUserRequest) -> Payload:
    changed = await moderation.unsuspend_user(ctx.session, ctx.admin, params.user_id)
    if not changed:
        return {"message": "User was not suspended"}
    logger.info("[%s] %s unsuspended user %s", ctx.request_id, ctx.admin.email, params.user_id)
    return {"message": "User unsuspended"}


async def _set_vehicle_verification(
    ctx: ActionContext, params: SetVehicleVerificationRequest
) -> Payload:
    label = "verified" if params.is_verified else "unverified"
    changed = await moderation.set_vehicle_verification(
        ctx.session, ctx.admin, params.vehicle_id, params.is_verified
    )
    if not changed:
        return {"message": f"Vehicle already {label}"}
    return {"message": f"Vehicle {label}"}


async def _update_claim_status(ctx: ActionContext, params: UpdateClaimStatusRequest) -> Payload:
    await moderation.update_claim_status(ctx.session, ctx.admin, params.claim_id, params.status)
    return {"message": f"Claim marked as {params.status}"}


async def _update_listing_status(
    ctx: ActionContext, params: UpdateListingStatusRequest
) -> Payload:
    await moderation.update_listing_status(
        ctx.session, ctx.admin, params.listing_id, params.status, params.admin_notes
    )
    return {"message": f"Listing marked as {params.status}"}


ACTION_REGISTRY: dict[ActionType, Action] = {
    ActionType.OVERVIEW: Action(EmptyRequest, _overview),
    ActionType.USERS: Action(PageRequest, _users),
    ActionType.ACTIVITY: Action(PageRequest, _activity),
    ActionType.VEHICLES: Action(PageRequest, _vehicles),
    ActionType.TRANSFERS: Action(PageRequest, _transfers),
    ActionType.CLAIMS: Action(PageRequest, _claims),
    ActionType.LISTINGS: Action(PageRequest, _listings),
    ActionType.SUSPEND_USER: Action(SuspendUserRequest, _suspend_user),
    ActionType.UNSUSPEND_USER: Action(UnsuspendUserRequest, _unsuspend_user),
    ActionType.SET_VEHICLE_VERIFICATION: Action(SetVehicleVerificationRequest, _set_vehicle_verification),
    ActionType.GET_VEHICLE_FOR_CLAIM: Action(VehicleForClaimRequest, _vehicle_for_claim),
    ActionType.UPDATE_CLAIM_STATUS: Action(UpdateClaimStatusRequest, _update_claim_status),
    ActionType.UPDATE_LISTING_STATUS: Action(UpdateListingStatusRequest, _update_listing_status),
}


# ── Dispatch ──────────────────────────────────────────────────────────────────

def parse_action_type(body: Any) -> ActionType:
    """Whitelist check on ``body["type"]``; nothing else in the body is looked at."""
    if not isinstance(body, dict):
        raise InvalidJSON("Request body must be a JSON object")
    raw = body.get("type")
    try:
        return ActionType(raw)
    except ValueError:
        raise InvalidAction(f"Invalid action type: {raw}") from None


def validate_params(schema: type[BaseModel], body: dict[str, Any]) -> BaseModel:
    """Run the action's schema; report the first failing field."""
    try:
        return schema.model_validate(body)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "body"
        raise ValidationFailed(
            f"{field}: {first['msg']}",
            details={
                "field": field,
                "issues": exc.errors(include_url=False, include_context=False, include_input=False),
            },
        ) from None


async def dispatch(ctx: ActionContext, action_type: ActionType, body: dict[str, Any]) -> Payload:
    action = ACTION_REGISTRY.get(action_type)
    if action is None:
        raise UnknownAction(f"Unknown action type: {action_type.value}")
    params = validate_params(action.schema, body)
    return await action.handler(ctx, params)
