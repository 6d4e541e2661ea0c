import logging
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse

from app.config import settings, configure_logging
from app.agents.postgres import PostgresAgent, create_tables, dispose_engine, get_engine
from app.billing import pricing
from app.billing.checkout import checkout as checkout_cart
from app.billing.documents import filename_for, render_cart_invoice, render_stored_invoice
from app.billing.reporting import build_invoice_detail, summarize_sales
from app.errors import NotFoundError, PosError
from app.models.category import CategoryCreate, CategoryRead, CategoryUpdate
from app.schemas.cart import AddLineRequest, Cart, CartResponse, CartTotals, CategorySnapshot
from app.schemas.invoice import InvoiceDetail, InvoiceRead
from app.schemas.report import SalesSummary

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    if settings.CREATE_TABLES:
        await create_tables(get_engine())
        logger.info("Tables created")
    yield
    await dispose_engine()

app = FastAPI(lifespan=lifespan)

def get_agent():
    return PostgresAgent()

@app.exception_handler(PosError)
async def pos_error_handler(request: Request, exc: PosError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

def pdf_response(content: bytes, invoice_id: int):
    return Response(
        content=content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename_for(invoice_id)}"',
            "X-Invoice-Id": str(invoice_id),
        },
    )

# Admin

@app.get("/categories", response_model=list[CategoryRead])
async def list_categories(agent: PostgresAgent = Depends(get_agent)):
    return await agent.list_categories()

@app.post("/categories", response_model=CategoryRead, status_code=201)
async def create_category(category: CategoryCreate, agent: PostgresAgent = Depends(get_agent)):
    return await agent.insert_category(category)

@app.patch("/categories/{category_id}", response_model=CategoryRead)
async def update_category(category_id: int, patch: CategoryUpdate, agent: PostgresAgent = Depends(get_agent)):
    return await agent.update_category(category_id, patch)

@app.delete("/categories/{category_id}", status_code=204)
async def delete_category(category_id: int, agent: PostgresAgent = Depends(get_agent)):
    await agent.delete_category(category_id)
    return Response(status_code=204)

@app.get("/dashboard", response_model=SalesSummary)
async def dashboard(agent: PostgresAgent = Depends(get_agent)):
    invoices = await agent.list_invoices()
    items = await agent.list_invoice_items()
    return summarize_sales(invoices, items)

# Cashier

@app.post("/cart/lines", response_model=CartResponse)
async def add_cart_line(request: AddLineRequest, agent: PostgresAgent = Depends(get_agent)):
    category = await agent.get_category(request.line.category_id)
    if category is None:
        raise NotFoundError(f"Category {request.line.category_id} not found.")

    snapshot = CategorySnapshot(id=category.id, name=category.name, tax_rate=category.tax_rate)
    line = request.line
    cart = pricing.add_line(request.cart, line.name, line.quantity, line.unit_price, snapshot)
    return CartResponse(cart=cart, totals=pricing.aggregate(cart))

@app.post("/cart/lines/{index}/remove", response_model=CartResponse)
async def remove_cart_line(index: int, cart: Cart):
    cart = pricing.remove_line(cart, index)
    return CartResponse(cart=cart, totals=pricing.aggregate(cart))

@app.post("/cart/totals", response_model=CartTotals)
async def cart_totals(cart: Cart):
    return pricing.aggregate(cart)

@app.post("/checkout")
async def checkout(cart: Cart, agent: PostgresAgent = Depends(get_agent)):
    invoice, _ = await checkout_cart(cart, agent)
    return pdf_response(render_cart_invoice(invoice, cart), invoice.id)

# History

@app.get("/invoices", response_model=list[InvoiceRead])
async def list_invoices(agent: PostgresAgent = Depends(get_agent)):
    return await agent.list_invoices()

async def fetch_invoice(invoice_id: int, agent: PostgresAgent):
    invoice = await agent.get_invoice(invoice_id)
    if invoice is None:
        raise NotFoundError("Invoice not found.")
    return invoice, await agent.list_invoice_items(invoice_id)

@app.get("/invoices/{invoice_id}", response_model=InvoiceDetail)
async def get_invoice(invoice_id: int, agent: PostgresAgent = Depends(get_agent)):
    invoice, items = await fetch_invoice(invoice_id, agent)
    return build_invoice_detail(invoice, items)

@app.get("/invoices/{invoice_id}/pdf")
async def get_invoice_pdf(invoice_id: int, agent: PostgresAgent = Depends(get_agent)):
    invoice, items = await fetch_invoice(invoice_id, agent)
    return pdf_response(render_stored_invoice(invoice, items), invoice.id)
