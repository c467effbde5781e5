"""DTOs: plain frozen containers handed from the handlers to the CLI.

Money is pre-formatted as a string and timestamps as text, so the CLI
never touches Cart, Order or Product directly.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.cart import Cart
from storefront.domain.model.catalog import ProductPage
from storefront.domain.model.order import Order
from storefront.domain.model.product import Product

_TIMESTAMP = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class CartLineDTO:
    product_id: str
    name: str
    image: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str


@dataclass(frozen=True)
class CartDTO:
    user_id: str
    items: list[CartLineDTO]
    total: str
    item_count: int
    updated_at: str

    @staticmethod
    def from_cart(cart: Cart) -> CartDTO:
        return CartDTO(
            user_id=cart.user_id,
            items=[
                CartLineDTO(
                    product_id=i.product_id,
                    name=i.name,
                    image=i.image,
                    quantity=i.quantity,
                    unit_price=str(i.unit_price),
                    line_total=str(i.line_total),
                )
                for i in cart.items
            ],
            total=str(cart.total),
            item_count=cart.item_count,
            updated_at=cart.updated_at.strftime(_TIMESTAMP),
        )


@dataclass(frozen=True)
class OrderLineDTO:
    product_id: str
    name: str
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    id: str
    user_id: str
    status: str
    payment_status: str
    payment_id: str | None
    items: list[OrderLineDTO]
    total: str
    shipping_address: str
    billing_address: str
    created_at: str
    updated_at: str

    @staticmethod
    def from_order(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,  # type: ignore[arg-type]
            user_id=order.user_id,
            status=order.status.value,
            payment_status=order.payment_status.value,
            payment_id=order.payment_id,
            items=[
                OrderLineDTO(
                    product_id=i.product_id,
                    name=i.name,
                    quantity=i.quantity,
                    unit_price=str(i.unit_price),
                    line_total=str(i.line_total),
                )
                for i in order.items
            ],
            total=str(order.total),
            shipping_address=str(order.shipping_address),
            billing_address=str(order.billing_address),
            created_at=order.created_at.strftime(_TIMESTAMP),
            updated_at=order.updated_at.strftime(_TIMESTAMP),
        )


@dataclass(frozen=True)
class CheckoutResult:
    """Output of the checkout saga.

    ``cart_cleared`` is False when the order was saved but the cart could
    not be emptied afterwards.
    """

    order: OrderDTO
    cart_cleared: bool


@dataclass(frozen=True)
class ProductDTO:
    id: str
    name: str
    description: str
    category: str
    price: str
    sale_price: str | None
    on_sale: bool
    effective_price: str
    in_stock: bool
    inventory: int
    images: list[str]

    @staticmethod
    def from_product(product: Product) -> ProductDTO:
        return ProductDTO(
            id=product.id,
            name=product.name,
            description=product.description,
            category=product.category,
            price=str(product.price),
            sale_price=str(product.sale_price) if product.sale_price is not None else None,
            on_sale=product.on_sale,
            effective_price=str(product.effective_price),
            in_stock=product.in_stock,
            inventory=product.inventory,
            images=list(product.images),
        )


@dataclass(frozen=True)
class ProductPageDTO:
    products: list[ProductDTO]
    page: int
    page_size: int
    total: int
    has_more: bool

    @staticmethod
    def from_page(page: ProductPage) -> ProductPageDTO:
        return ProductPageDTO(
            products=[ProductDTO.from_product(p) for p in page.products],
            page=page.page,
            page_size=page.page_size,
            total=page.total,
            has_more=page.has_more,
        )


@dataclass(frozen=True)
class PaymentEventResult:
    """Acknowledgement returned to the payment provider's webhook call."""

    event_id: str
    outcome: str
    order_id: str | None = None


@dataclass(frozen=True)
class SalesSummaryDTO:
    order_count: int
    orders_by_status: dict[str, int]
    paid_order_count: int
    paid_revenue: str
    average_paid_order: str
