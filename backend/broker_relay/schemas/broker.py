from pydantic import BaseModel, ConfigDict
from typing import Any, Optional, Union
from enum import Enum


class KillSwitchStatus(str, Enum):
    """Dhan kill switch actions."""
    ACTIVATE = "ACTIVATE"
    DEACTIVATE = "DEACTIVATE"


class BrokerInfo(BaseModel):
    """Broker metadata handed to the front end."""
    model_config = ConfigDict(frozen=True)

    brokerClientId: str
    brokerName: str
    appId: str
    apiKey: str
    apiSecret: str
    status: str = "Active"
    lastTokenGeneratedAt: str
    addedAt: str


class PlaceOrderRequest(BaseModel):
    """
    Order fields forwarded to Dhan as sent, numbers and strings alike.
    Absent fields are not sent.
    """
    brokerClientId: Optional[Any] = None
    transactionType: Optional[Any] = None
    exchangeSegment: Optional[Any] = None
    productType: Optional[Any] = None
    orderType: Optional[Any] = None
    validity: Optional[Any] = None
    tradingSymbol: Optional[Any] = None
    securityId: Optional[Any] = None
    quantity: Optional[Any] = None
    price: Optional[Any] = None
    drvExpiryDate: Optional[Any] = None
    drvOptionType: Optional[Any] = None

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)


class CancelOrderRequest(BaseModel):
    orderId: Optional[Union[str, int]] = None


class RequestCodeExchange(BaseModel):
    """Flattrade request-code exchange as sent by the front end."""
    apiKey: Optional[str] = None
    requestCode: Optional[str] = None
    apiSecret: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.apiKey and self.requestCode and self.apiSecret)
