from dataclasses import dataclass, field, asdict
import os


@dataclass
class BillingDetails:
    first_name: str = "Automation"
    last_name: str = "User"
    company: str = "QA Ltd"
    street_address: str = "1 Test Street"
    apartment: str = "Apt 2"
    town_city: str = "Sofia"
    postcode: str = "1000"
    phone: str = "0888123456"
    email: str = "automation.user@example.com"

    def as_form(self) -> dict[str, str]:
        return asdict(self)

    @classmethod
    def from_env(cls) -> "BillingDetails":
        defaults = cls()
        return cls(**{
            name: os.getenv(f"STOREFRONT_BILLING_{name.upper()}", value)
            for name, value in asdict(defaults).items()
        })


@dataclass
class CardDetails:
    number: str
    expiry: str
    cvc: str


@dataclass
class StorefrontContext:
    # Środowisko
    base_url: str

    # Konto
    username: str = ""
    password: str = ""
    display_name: str = "Automation User"

    # Checkout
    product_path: str = "/product/album/"
    billing: BillingDetails = field(default_factory=BillingDetails)
    # Karty testowe Stripe
    card: CardDetails = field(default_factory=lambda: CardDetails("4242424242424242", "12 / 34", "123"))
    declined_card: CardDetails = field(default_factory=lambda: CardDetails("4000000000000002", "12 / 34", "123"))
    declined_message: str = "Your card was declined."

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    @property
    def login_url(self) -> str:
        return self.url("/login/")

    @property
    def product_url(self) -> str:
        return self.url(self.product_path)

    @classmethod
    def from_env(cls, base_url: str | None = None) -> "StorefrontContext":
        card = CardDetails(
            number=os.getenv("STOREFRONT_CARD_NUMBER", "4242424242424242"),
            expiry=os.getenv("STOREFRONT_CARD_EXPIRY", "12 / 34"),
            cvc=os.getenv("STOREFRONT_CARD_CVC", "123"),
        )
        declined_card = CardDetails(
            number=os.getenv("STOREFRONT_DECLINED_CARD_NUMBER", "4000000000000002"),
            expiry=card.expiry,
            cvc=card.cvc,
        )

        return cls(
            base_url=base_url or os.getenv("STOREFRONT_BASE_URL", "https://ovcharski.com/shop"),
            username=os.getenv("STOREFRONT_USERNAME", ""),
            password=os.getenv("STOREFRONT_PASSWORD", ""),
            display_name=os.getenv("STOREFRONT_DISPLAY_NAME", "Automation User"),
            product_path=os.getenv("STOREFRONT_PRODUCT_PATH", "/product/album/"),
            billing=BillingDetails.from_env(),
            card=card,
            declined_card=declined_card,
            declined_message=os.getenv("STOREFRONT_DECLINED_MESSAGE", "Your card was declined."),
        )
