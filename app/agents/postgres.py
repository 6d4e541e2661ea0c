import logging
from contextlib import asynccontextmanager
from functools import wraps
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from app.config import settings
from app.errors import ConflictError, NotFoundError, StoreError
from app.models.category import Category, CategoryCreate, CategoryUpdate
from app.models.invoice import Invoice, InvoiceItem
from app.schemas.invoice import InvoiceItemRead

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None

def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        _engine = create_async_engine(settings.DATABASE_URL)
    return _engine

async def dispose_engine():
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None

async def create_tables(engine: AsyncEngine):
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

def store_errors(func):
    """Re-raise driver failures as StoreError, keeping the driver's message."""
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except IntegrityError as e:
            message = str(e.orig) if e.orig is not None else str(e)
            logger.warning("%s rejected by store: %s", func.__name__, message)
            raise ConflictError(message) from e
        except SQLAlchemyError as e:
            message = str(e.orig) if getattr(e, "orig", None) is not None else str(e)
            logger.error("%s failed: %s", func.__name__, message)
            raise StoreError(message) from e
    return wrapper

class PostgresAgent:
    def __init__(self, engine: AsyncEngine | None = None):
        self.engine = engine or get_engine()

    @asynccontextmanager
    async def get_session(self):
        async with AsyncSession(self.engine, expire_on_commit=False) as session:
            yield session

    @store_errors
    async def list_categories(self):
        async with self.get_session() as db:
            statement = select(Category).order_by(Category.name)
            return list((await db.exec(statement)).all())

    @store_errors
    async def get_category(self, category_id: int):
        async with self.get_session() as db:
            return await db.get(Category, category_id)

    @store_errors
    async def insert_category(self, category: CategoryCreate):
        async with self.get_session() as db:
            db_category = Category(name=category.name, tax_rate=category.tax_rate)
            db.add(db_category)
            await db.commit()
            await db.refresh(db_category)
            logger.info("Created category %s (%s) with rate %s", db_category.id, db_category.name, db_category.tax_rate)
            return db_category

    @store_errors
    async def update_category(self, category_id: int, patch: CategoryUpdate):
        async with self.get_session() as db:
            db_category = await db.get(Category, category_id)
            if db_category is None:
                raise NotFoundError(f"Category {category_id} not found.")
            for key, value in patch.model_dump(exclude_unset=True, exclude_none=True).items():
                setattr(db_category, key, value)
            await db.commit()
            await db.refresh(db_category)
            logger.info("Updated category %s: %s", category_id, patch.model_dump(exclude_unset=True))
            return db_category

    @store_errors
    async def delete_category(self, category_id: int):
        async with self.get_session() as db:
            db_category = await db.get(Category, category_id)
            if db_category is None:
                raise NotFoundError(f"Category {category_id} not found.")
            await db.delete(db_category)
            await db.commit()
            logger.info("Deleted category %s", category_id)

    @store_errors
    async def insert_invoice(self, invoice: Invoice, items: list[InvoiceItem]):
        """Write an invoice and its items in a single transaction.

        The invoice is flushed first so its id exists before any item row
        references it. Any failure rolls back both writes.
        """
        async with self.get_session() as db:
            async with db.begin():
                db.add(invoice)
                await db.flush()
                for item in items:
                    item.invoice_id = invoice.id
                db.add_all(items)
            await db.refresh(invoice)
            return invoice, items

    @store_errors
    async def list_invoices(self):
        async with self.get_session() as db:
            statement = select(Invoice).order_by(Invoice.created_at.desc(), Invoice.id.desc())
            return list((await db.exec(statement)).all())

    @store_errors
    async def get_invoice(self, invoice_id: int):
        async with self.get_session() as db:
            return await db.get(Invoice, invoice_id)

    @store_errors
    async def list_invoice_items(self, invoice_id: int | None = None):
        """Items joined with their category name; the name is None when the category is gone."""
        async with self.get_session() as db:
            statement = (
                select(InvoiceItem, Category.name)
                .outerjoin(Category, Category.id == InvoiceItem.category_id)
                .order_by(InvoiceItem.id)
            )
            if invoice_id is not None:
                statement = statement.where(InvoiceItem.invoice_id == invoice_id)
            rows = (await db.exec(statement)).all()
            return [
                InvoiceItemRead(**item.model_dump(), category_name=category_name)
                for item, category_name in rows
            ]
