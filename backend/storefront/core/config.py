from decimal import Decimal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Printify
    printify_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("printify_api_key", "printify_api_token"),
    )
    openssl_secret: str = Field(
        default="",
        validation_alias=AliasChoices("openssl_secret", "printify_webhook_secret"),
    )
    printify_shop_id: str = "22732326"
    printify_api_base: str = "https://api.printify.com/v1"
    printify_timeout_seconds: float = 30.0
    printify_user_agent: str = "NoTrumpNWay-Store/1.0"

    # CORS
    cors_allowed_origins: str = "http://localhost:3000"

    # Cart
    max_cart_quantity: int = 10
    sales_tax_rate: Decimal = Decimal("0.08")

    # App
    debug: bool = False
    shop_title: str = "NoTrumpNWay Store"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    @property
    def printify_configured(self) -> bool:
        return bool(self.printify_api_key and self.printify_shop_id)

    model_config = {"env_file": ".env", "extra": "ignore", "populate_by_name": True}


settings = Settings()
