"""Vendor tools: deterministic vendor generation and outbound vendor calls."""

import hashlib
import logging
import random
import re
import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from domain.entities import CallOutcome, VendorRecord
from infrastructure.call_client import OutboundCallClient
from logic.common.warehouse import VendorWarehouse
from logic.tools.registry import ToolDef

logger = logging.getLogger(__name__)

MIN_VENDORS = 1
MAX_VENDORS = 25

_NAME_PREFIXES = (
    "Apex", "Atlas", "Bluewater", "Crescent", "Evergreen", "Harbor", "Ironwood",
    "Keystone", "Meridian", "Northstar", "Pioneer", "Silverline", "Summit",
    "Vertex", "Westgate",
)
_NAME_SUFFIXES = (
    "Associates", "Co.", "Group", "Holdings", "Partners", "Solutions", "Works",
    "Alliance", "Collective", "Trading",
)
_SPECIALITIES = (
    "Enterprise {industry} contracts",
    "Small-business {industry} services",
    "Cross-border {industry}",
    "Sustainable {industry} sourcing",
    "Express {industry} fulfilment",
    "Bulk {industry} procurement",
    "Premium {industry} consulting",
    "Regional {industry} distribution",
)


class GenerateVendorListArgs(BaseModel):
    model_config = ConfigDict(
        extra="ignore", json_schema_extra={"additionalProperties": False}
    )

    industry: str = Field(
        ..., min_length=1, description='Industry of the vendors, e.g. "logistics"'
    )
    location: str = Field(
        ..., min_length=1, description='City or region, e.g. "Berlin"'
    )
    count: int = Field(
        default=5,
        ge=MIN_VENDORS,
        le=MAX_VENDORS,
        description="Number of vendors to generate",
    )


class CallVendorArgs(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={"additionalProperties": False},
        str_strip_whitespace=True,
    )

    number: str = Field(
        ..., min_length=1, description="Phone number to call, in E.164 format"
    )
    vendor_name: str | None = Field(None, description="Name of the vendor called")
    first_message: str | None = Field(
        None, description="Opening sentence spoken when the call connects"
    )
    context: str | None = Field(
        None, description="What the negotiation is about"
    )


def _seed_for(industry: str, location: str) -> int:
    key = f"{industry.strip().lower()}|{location.strip().lower()}"
    return int(hashlib.sha256(key.encode("utf-8")).hexdigest()[:16], 16)


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def generate_vendors(industry: str, location: str, count: int) -> list[VendorRecord]:
    """Generate vendors reproducibly from the (industry, location) pair.

    The same pair always yields the same vendors in the same order; a larger
    count extends the list without changing its head.
    """
    rng = random.Random(_seed_for(industry, location))
    industry_label = industry.strip()
    location_label = location.strip()

    vendors: list[VendorRecord] = []
    used_names: set[str] = set()
    while len(vendors) < count:
        name = (
            f"{rng.choice(_NAME_PREFIXES)} {industry_label.title()} "
            f"{rng.choice(_NAME_SUFFIXES)}"
        )
        speciality = rng.choice(_SPECIALITIES).format(industry=industry_label.lower())
        phone = f"+49 {rng.randint(100, 999)} {rng.randint(1000000, 9999999)}"
        rating = round(rng.uniform(3.0, 5.0), 1)
        vendor_id = str(uuid.UUID(int=rng.getrandbits(128), version=4))
        if name in used_names:
            continue
        used_names.add(name)
        vendors.append(
            VendorRecord(
                id=vendor_id,
                name=name,
                industry=industry_label,
                location=location_label,
                speciality=speciality,
                phone=phone,
                email=f"contact@{_slug(name)}.example.com",
                rating=rating,
            )
        )
    return vendors


def default_first_message(vendor_name: str | None) -> str:
    greeting = f"Hello {vendor_name}!" if vendor_name else "Hello!"
    return (
        f"{greeting} I'm calling on behalf of a client who would like to discuss "
        "a potential partnership with you. Do you have a moment to talk?"
    )


def build_vendor_tools(
    warehouse: VendorWarehouse, call_client: OutboundCallClient
) -> list[ToolDef]:
    """Build the vendor tools bound to their capabilities."""

    async def generate_vendor_list(args: GenerateVendorListArgs) -> dict[str, Any]:
        vendors = generate_vendors(args.industry, args.location, args.count)
        try:
            await warehouse.insert(vendors)
        except Exception as e:
            # Persistence is secondary; the generated list is still returned.
            logger.warning(f"Vendor warehouse insert skipped: {e}")
        return {
            "industry": args.industry,
            "location": args.location,
            "count": len(vendors),
            "vendors": [vendor.model_dump() for vendor in vendors],
        }

    async def call_vendor(args: CallVendorArgs) -> CallOutcome:
        body: dict[str, Any] = {
            "number": args.number,
            "first_message": args.first_message
            or default_first_message(args.vendor_name),
        }
        if args.vendor_name:
            body["vendor_name"] = args.vendor_name
        if args.context:
            body["context"] = args.context
        logger.info(f"Placing outbound call to {args.number}")
        return await call_client.place_call(body)

    return [
        ToolDef(
            name="generate_vendor_list",
            description=(
                "Generate a list of potential vendors (negotiation partners) for an "
                "industry in a location. Results are reproducible for the same "
                "industry and location."
            ),
            arguments_model=GenerateVendorListArgs,
            handler=generate_vendor_list,
        ),
        ToolDef(
            name="call_vendor",
            description=(
                "Place an outbound phone call to a vendor to open a negotiation. "
                "Returns whether the call was accepted by the calling service."
            ),
            arguments_model=CallVendorArgs,
            handler=call_vendor,
        ),
    ]
