"""
API record schemas — request bodies accepted by the CRUD endpoints.

Create schemas enforce required fields; update schemas make every field
optional and only carry the keys the client actually sent.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

AccountType = Literal["Commercial", "Residential"]
AccountStatus = Literal["Active", "Inactive"]
CommunicationPreference = Literal["Voice", "Text", "Email"]
WorkOrderStatus = Literal[
    "Pending",
    "Scheduled",
    "Assigned",
    "In Progress",
    "On Hold",
    "Completed",
    "Invoiced",
    "Cancelled",
]
WorkOrderPriority = Literal["Emergency", "High", "Medium", "Low"]

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
PHONE_PATTERN = r"^[\d\s\-\+\(\)]+$"

# Allowed work-order status moves; terminal states map to [].
WORK_ORDER_TRANSITIONS: dict[str, list[str]] = {
    "Pending": ["Scheduled", "Cancelled"],
    "Scheduled": ["Assigned", "In Progress", "On Hold", "Cancelled"],
    "Assigned": ["In Progress", "On Hold", "Cancelled"],
    "In Progress": ["Completed", "On Hold"],
    "On Hold": ["Scheduled", "In Progress", "Cancelled"],
    "Completed": ["Invoiced"],
    "Invoiced": [],
    "Cancelled": [],
}


class _Record(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    def changes(self) -> dict[str, Any]:
        """Only the fields the client supplied."""
        return self.model_dump(mode="json", exclude_unset=True)


# ── Accounts ────────────────────────────────────────────────────


class AccountCreate(_Record):
    account_number: str = Field(min_length=1, max_length=50)
    account_name: str = Field(min_length=1, max_length=255)
    account_type: AccountType = "Commercial"
    status: AccountStatus = "Active"
    contact_email: str | None = Field(default=None, pattern=EMAIL_PATTERN)
    contact_phone: str | None = Field(default=None, max_length=50)
    billing_address_1: str | None = Field(default=None, max_length=255)
    billing_city: str | None = Field(default=None, max_length=100)
    billing_state: str | None = Field(default=None, max_length=50)
    billing_zip: str | None = Field(default=None, max_length=20)


class AccountUpdate(_Record):
    account_number: str | None = Field(default=None, min_length=1, max_length=50)
    account_name: str | None = Field(default=None, min_length=1, max_length=255)
    account_type: AccountType | None = None
    status: AccountStatus | None = None
    contact_email: str | None = Field(default=None, pattern=EMAIL_PATTERN)
    contact_phone: str | None = Field(default=None, max_length=50)
    billing_address_1: str | None = Field(default=None, max_length=255)
    billing_city: str | None = Field(default=None, max_length=100)
    billing_state: str | None = Field(default=None, max_length=50)
    billing_zip: str | None = Field(default=None, max_length=20)


# ── Contacts ────────────────────────────────────────────────────


class ContactCreate(_Record):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    title: str | None = Field(default=None, max_length=100)
    email_address: str | None = Field(default=None, pattern=EMAIL_PATTERN)
    phone_number: str | None = Field(default=None, pattern=PHONE_PATTERN, max_length=20)
    is_primary_contact: bool = False
    communication_preference: CommunicationPreference | None = None
    notes: str | None = Field(default=None, max_length=1000)


class ContactUpdate(_Record):
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    title: str | None = Field(default=None, max_length=100)
    email_address: str | None = Field(default=None, pattern=EMAIL_PATTERN)
    phone_number: str | None = Field(default=None, pattern=PHONE_PATTERN, max_length=20)
    is_primary_contact: bool | None = None
    communication_preference: CommunicationPreference | None = None
    notes: str | None = Field(default=None, max_length=1000)


# ── Work orders ─────────────────────────────────────────────────


class WorkOrderCreate(_Record):
    work_order_number: str = Field(min_length=1, max_length=50)
    account_id: str
    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    type: str = Field(default="Service", max_length=50)
    priority: WorkOrderPriority = "Medium"
    status: WorkOrderStatus = "Scheduled"
    scheduled_date: date | None = None
    assigned_to: str | None = Field(default=None, max_length=255)


class WorkOrderUpdate(_Record):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    type: str | None = Field(default=None, max_length=50)
    priority: WorkOrderPriority | None = None
    status: WorkOrderStatus | None = None
    scheduled_date: date | None = None
    assigned_to: str | None = Field(default=None, max_length=255)
    completion_notes: str | None = Field(default=None, max_length=2000)
