from decimal import Decimal
from pydantic import field_validator
from sqlmodel import SQLModel, Field

class CategoryBase(SQLModel):
    name: str = Field(min_length=1, unique=True)
    tax_rate: Decimal = Field(ge=0, le=1, max_digits=5, decimal_places=4)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str):
        value = value.strip()
        if not value:
            raise ValueError("Category name must not be empty")
        return value

class Category(CategoryBase, table=True):
    __tablename__ = "categories"
    id: int | None = Field(default=None, primary_key=True)

class CategoryCreate(CategoryBase):
    pass

class CategoryUpdate(SQLModel):
    name: str | None = Field(default=None, min_length=1)
    tax_rate: Decimal | None = Field(default=None, ge=0, le=1, max_digits=5, decimal_places=4)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str | None):
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Category name must not be empty")
        return value

class CategoryRead(CategoryBase):
    id: int
