"""Pydantic models describing the Shopify Admin API payloads we use."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class ShopifyBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GraphQLErrorPayload(ShopifyBaseModel):
    message: str
    extensions: dict[str, object] | None = None

    @property
    def code(self) -> str | None:
        if not self.extensions:
            return None
        code = self.extensions.get("code")
        return code if isinstance(code, str) else None


class GraphQLResponse(ShopifyBaseModel):
    """Top-level GraphQL envelope; ``errors`` means the whole call failed."""

    data: dict[str, object] | None = None
    errors: list[GraphQLErrorPayload] | None = None


# productVariants listing


class PageInfo(ShopifyBaseModel):
    has_next_page: bool = Field(alias="hasNextPage")
    end_cursor: str | None = Field(default=None, alias="endCursor")


class InventoryItemRef(ShopifyBaseModel):
    id: str


class VariantNode(ShopifyBaseModel):
    sku: str | None = None
    inventory_item: InventoryItemRef | None = Field(default=None, alias="inventoryItem")

    @field_validator("sku", mode="before")
    @classmethod
    def _blank_sku_to_none(cls, value: object) -> object:
        return _blank_to_none(value)


class VariantEdge(ShopifyBaseModel):
    node: VariantNode
    cursor: str | None = None


class ProductVariantConnection(ShopifyBaseModel):
    page_info: PageInfo = Field(alias="pageInfo")
    edges: list[VariantEdge] = Field(default_factory=list["VariantEdge"])


class ProductVariantsData(ShopifyBaseModel):
    product_variants: ProductVariantConnection = Field(alias="productVariants")


# inventorySetQuantities / inventoryActivate


class UserErrorPayload(ShopifyBaseModel):
    message: str
    field: list[str] | None = None
    code: str | None = None

    @field_validator("field", mode="before")
    @classmethod
    def _stringify_path(cls, value: object) -> object:
        if isinstance(value, list):
            return [str(part) for part in value]
        return value


class InventorySetQuantitiesPayload(ShopifyBaseModel):
    user_errors: list[UserErrorPayload] = Field(
        default_factory=list["UserErrorPayload"], alias="userErrors"
    )


class InventorySetQuantitiesData(ShopifyBaseModel):
    inventory_set_quantities: InventorySetQuantitiesPayload | None = Field(
        default=None, alias="inventorySetQuantities"
    )


class InventoryLevelRef(ShopifyBaseModel):
    id: str


class InventoryActivatePayload(ShopifyBaseModel):
    inventory_level: InventoryLevelRef | None = Field(default=None, alias="inventoryLevel")
    user_errors: list[UserErrorPayload] = Field(
        default_factory=list["UserErrorPayload"], alias="userErrors"
    )


class InventoryActivateData(ShopifyBaseModel):
    inventory_activate: InventoryActivatePayload | None = Field(
        default=None, alias="inventoryActivate"
    )


# REST locations listing


class LocationPayload(ShopifyBaseModel):
    id: int
    name: str = ""
    active: bool | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _none_to_blank(cls, value: object) -> object:
        return "" if value is None else value


class LocationsResponse(ShopifyBaseModel):
    locations: list[LocationPayload] = Field(default_factory=list["LocationPayload"])
