from .contact_load import (
    PageResponse,
    ListChoice,
    ClientChoiceItems,
    CampaignContactRecord,
    MappedContact,
    SkippedPerson,
    MappingResult,
    ContactLoadPayload,
    ContactLoadSummary,
)

__all__ = [
    "PageResponse", "ListChoice", "ClientChoiceItems",
    "CampaignContactRecord", "MappedContact", "SkippedPerson", "MappingResult",
    "ContactLoadPayload", "ContactLoadSummary",
]
