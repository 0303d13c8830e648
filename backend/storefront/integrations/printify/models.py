from pydantic import BaseModel


class PrintifyShopInfo(BaseModel):
    id: int | str
    title: str
    sales_channel: str
    status: str | None = None
    products_count: int | None = None


class ShopConfig(BaseModel):
    title: str
    sales_channel: str
