from pydantic import BaseModel, Field

from storefront.app.common.converters import MAX_ID


class AddToCartForm(BaseModel):
    product_id: int = Field(gt=0, le=MAX_ID)
    quantity: int = Field(default=1, ge=1)


class UpdateCartItemForm(BaseModel):
    quantity: int = Field(ge=1)
