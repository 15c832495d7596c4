from dataclasses import dataclass
from typing import Optional


@dataclass
class LoginData:
    logged_in: bool = False
    account_verified: bool = False


@dataclass
class ProductData:
    name: Optional[str] = None
    price: Optional[float] = None
    url: Optional[str] = None
    added_to_cart: bool = False


@dataclass
class CheckoutData:
    billing_filled: bool = False
    card_filled: bool = False
    # Sygnał po kliknięciu "Place order": navigation / heading / thank_you
    order_signal: Optional[str] = None
    order_received: bool = False
    order_number: Optional[str] = None
    card_error: Optional[str] = None


@dataclass
class RunData:
    login:    Optional[LoginData]    = None
    product:  Optional[ProductData]  = None
    checkout: Optional[CheckoutData] = None
