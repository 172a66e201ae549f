"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class ListingStatus(str, Enum):
    PENDING_MINIMUM = "pending_minimum"
    PENDING_REVIEW = "pending_review"
    ACTIVE = "active"
    REJECTED = "rejected"
    SOLD = "sold"
    CANCELLED = "cancelled"


class ListingEvent(str, Enum):
    """Inputs to the listing state machine."""
    SUBMIT = "SUBMIT"
    EDIT = "EDIT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    PROMOTE = "PROMOTE"
    DEMOTE = "DEMOTE"
    SELL = "SELL"
    CANCEL = "CANCEL"


class AccountClass(str, Enum):
    INDIVIDUAL = "individual"
    BUSINESS = "business"


class CardCondition(str, Enum):
    NM = "NM"
    LP = "LP"
    MP = "MP"
    HP = "HP"
    DMG = "DMG"


class CardLanguage(str, Enum):
    PT = "pt"
    EN = "en"
    JP = "jp"


class CardFinish(str, Enum):
    NORMAL = "normal"
    FOIL = "foil"
    REVERSE = "reverse"


class MarketTab(str, Enum):
    POPULAR = "popular"
    MOST_LISTED = "most_listed"
    LOWEST_PRICE = "lowest_price"
    HIGHEST_PRICE = "highest_price"


class UsageEventKind(str, Enum):
    ITEM_VIEWED = "view_card_market"
    BUY_CLICKED = "click_buy_now"


class NotificationKind(str, Enum):
    LISTING_SUBMITTED = "listing_submitted"
    LISTING_PENDING_MINIMUM = "listing_pending_minimum"
    LISTING_RESUBMITTED = "listing_resubmitted"
    LISTING_APPROVED = "listing_approved"
    LISTING_REJECTED = "listing_rejected"


class AuditAction(str, Enum):
    APPROVE_LISTING = "approve_listing"
    REJECT_LISTING = "reject_listing"
