"""
Order notification emails.

Two messages go out when an order is created:
- the full order with prices to the operator recipients (primary + cc)
- the same order without prices to the supplier

Delivery itself is done by an external email function; this module renders
the HTML and posts {to, cc, subject, html} to it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

import httpx
from jinja2 import Environment, PackageLoader, select_autoescape

from beverage_portal.config import Settings, get_settings
from beverage_portal.models.order import Order
from beverage_portal.schemas.email_settings import EmailSettingsRead

logger = logging.getLogger(__name__)

env = Environment(
    loader=PackageLoader("beverage_portal", "templates"),
    autoescape=select_autoescape(["html"]),
)


def _money(value: Any) -> str:
    return f"{Decimal(str(value)):.2f}"


env.filters["money"] = _money


def _render(template_name: str, context: Dict[str, Any]) -> str:
    tpl = env.get_template(f"emails/{template_name}.html")
    return tpl.render(**context)


def format_delivery_date(order: Order) -> str:
    return order.delivery_date.strftime("%d.%m.%Y")


def order_subject(restaurant_name: str, delivery_date: str) -> str:
    return f"Beverage order - {restaurant_name} - Delivery: {delivery_date}"


def supplier_subject(restaurant_name: str, delivery_date: str) -> str:
    return f"[New order] {restaurant_name} - {delivery_date}"


def _order_context(
    order: Order,
    restaurant_name: str,
    business_name: str,
    now: datetime,
    with_prices: bool,
) -> Dict[str, Any]:
    items = []
    for item in order.items:
        line = {
            "product_code": item.product_code,
            "product_name": item.product_name,
            "quantity": item.quantity,
        }
        if with_prices:
            line["price_per_stack"] = item.price_per_stack
            line["total_price"] = item.total_price
        items.append(line)

    context = {
        "business_name": business_name,
        "restaurant_name": restaurant_name,
        "delivery_date": format_delivery_date(order),
        "created_by": order.created_by,
        "submitted_at": now.strftime("%d.%m.%Y %H:%M"),
        "notes": order.notes,
        "items": items,
        "year": now.year,
    }
    if with_prices:
        context["total_amount"] = order.total_amount
    return context


def render_order_summary(
    order: Order, restaurant_name: str, business_name: str, now: Optional[datetime] = None
) -> str:
    """HTML for the operator email, prices included."""
    now = now or datetime.utcnow()
    return _render(
        "order_summary",
        _order_context(order, restaurant_name, business_name, now, with_prices=True),
    )


def render_supplier_notification(
    order: Order, restaurant_name: str, business_name: str, now: Optional[datetime] = None
) -> str:
    """HTML for the supplier email, no prices."""
    now = now or datetime.utcnow()
    return _render(
        "supplier_notification",
        _order_context(order, restaurant_name, business_name, now, with_prices=False),
    )


class EmailDispatchError(Exception):
    """Raised when the email function cannot be reached or rejects a message."""
    pass


class EmailDispatcher:
    """Posts rendered messages to the external email function."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return self.settings.email_enabled and bool(self.settings.email_function_url)

    async def send(
        self,
        to: List[str],
        cc: List[str],
        subject: str,
        html: str,
    ) -> Dict[str, Any]:
        if not to:
            raise EmailDispatchError("No recipients given")

        headers = {"Content-Type": "application/json"}
        if self.settings.email_function_key:
            headers["Authorization"] = f"Bearer {self.settings.email_function_key}"

        payload = {"to": to, "cc": cc, "subject": subject, "html": html}

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.email_timeout_seconds,
                transport=self.transport,
            ) as client:
                response = await client.post(
                    self.settings.email_function_url,
                    json=payload,
                    headers=headers,
                )
        except httpx.HTTPError as e:
            raise EmailDispatchError(f"Email function unreachable: {e}") from e

        if response.status_code >= 400:
            logger.error(
                "Email function error %s: %s", response.status_code, response.text
            )
            raise EmailDispatchError(
                f"Email function failed with status {response.status_code}: {response.text}"
            )

        try:
            body = response.json()
        except ValueError:
            body = {}
        if isinstance(body, dict) and body.get("success") is False:
            raise EmailDispatchError(body.get("error") or "Email function reported failure")

        logger.info("Email sent to %s: %s", ", ".join(to + cc), subject)
        return body if isinstance(body, dict) else {}


@dataclass
class NotificationOutcome:
    """Which of the order emails went out."""

    order_email_sent: bool = False
    supplier_email_sent: bool = False
    errors: Optional[List[str]] = None


class OrderNotifier:
    """
    Sends the order and supplier emails after an order is created.

    Failures are logged and reported in the outcome; they never undo the
    order. order.email_sent reflects the operator email only.
    """

    def __init__(self, dispatcher: EmailDispatcher, business_name: Optional[str] = None):
        self.dispatcher = dispatcher
        self.business_name = business_name or dispatcher.settings.business_name

    async def notify_order_created(
        self,
        order: Order,
        restaurant_name: str,
        recipients: EmailSettingsRead,
        now: Optional[datetime] = None,
    ) -> NotificationOutcome:
        outcome = NotificationOutcome(errors=[])
        if not self.dispatcher.is_configured:
            logger.info("Email dispatch disabled; skipping notifications for order %s", order.id)
            return outcome

        now = now or datetime.utcnow()
        delivery = format_delivery_date(order)

        if recipients.primary_recipients:
            try:
                await self.dispatcher.send(
                    recipients.primary_recipients,
                    recipients.cc_recipients,
                    order_subject(restaurant_name, delivery),
                    render_order_summary(order, restaurant_name, self.business_name, now),
                )
                outcome.order_email_sent = True
                order.email_sent = True
                order.email_sent_at = now
            except EmailDispatchError as e:
                logger.warning("Order email for %s failed: %s", order.id, e)
                outcome.errors.append(str(e))
        else:
            logger.warning("No primary recipients configured; order %s not emailed", order.id)

        if recipients.supplier_recipient:
            try:
                await self.dispatcher.send(
                    [recipients.supplier_recipient],
                    [],
                    supplier_subject(restaurant_name, delivery),
                    render_supplier_notification(order, restaurant_name, self.business_name, now),
                )
                outcome.supplier_email_sent = True
            except EmailDispatchError as e:
                logger.warning("Supplier email for %s failed: %s", order.id, e)
                outcome.errors.append(str(e))

        return outcome
