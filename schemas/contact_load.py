"""Contact load schemas — list choices, mapped contacts, load summary."""
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class PageResponse(BaseModel):
    item: str
    page: int
    body: Dict[str, Any] = Field(default_factory=dict)


class ListChoice(BaseModel):
    name: str
    identifier: str


class ClientChoiceItems(BaseModel):
    items: List[ListChoice]


class CampaignContactRecord(BaseModel):
    first_name: str
    last_name: str
    cell: str  # "+1" followed by ten digits
    zip: Optional[str] = None
    custom_fields: Optional[str] = None
    timezone_offset: Optional[str] = None
    message_status: Literal["needsMessage"] = "needsMessage"
    campaign_id: int

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump()


class MappedContact(BaseModel):
    outcome: Literal["mapped"] = "mapped"
    contact: CampaignContactRecord


class SkippedPerson(BaseModel):
    outcome: Literal["skipped"] = "skipped"
    person_id: Optional[str] = None
    reason: str


MappingResult = Union[MappedContact, SkippedPerson]


class ContactLoadPayload(BaseModel):
    """JSON payload stored on the job by the admin client."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    list_identifier: str = Field(alias="listIdentifier", min_length=1)
    request_contact_count: Optional[int] = Field(default=None, alias="requestContactCount")


class ContactLoadSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    final_count: int = Field(alias="finalCount")
    skipped_count: int = Field(default=0, alias="skippedCount")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
