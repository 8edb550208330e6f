"""Pydantic schemas for Starling API response validation"""

from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StarlingModel(BaseModel):
    """camelCase on the wire, snake_case in Python"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class StarlingAmount(StarlingModel):
    currency: Optional[str] = None
    minor_units: Optional[int] = 0


class StarlingAccount(StarlingModel):
    account_uid: str
    name: Optional[str] = None
    default_category: str
    currency: Optional[str] = None
    account_type: str


class StarlingFeedItem(StarlingModel):
    feed_item_uid: str
    direction: Literal["IN", "OUT"]
    status: Optional[str] = None
    counter_party_name: Optional[str] = None
    reference: Optional[str] = None
    spending_category: Optional[str] = None
    amount: StarlingAmount = StarlingAmount()
    transaction_time: Optional[str] = None
    source: Optional[str] = None


class StarlingSavingsGoal(StarlingModel):
    savings_goal_uid: str
    name: str
    state: Optional[str] = None
    target: Optional[StarlingAmount] = None
    total_saved: Optional[StarlingAmount] = None


class StarlingAccountsResponse(StarlingModel):
    accounts: List[StarlingAccount] = []


class StarlingFeedResponse(StarlingModel):
    feed_items: List[StarlingFeedItem] = []


class StarlingSavingsGoalsResponse(StarlingModel):
    savings_goal_list: List[StarlingSavingsGoal] = []


class StarlingCreateSavingsGoalResponse(StarlingModel):
    savings_goal_uid: Optional[str] = None
    success: bool = True


class StarlingTransferResponse(StarlingModel):
    transfer_uid: Optional[str] = None
    success: bool = True
