"""HTML renderers for transactional email.

Every renderer takes a plain context dict and returns ``(subject, html)``.
Values that originate from customers are escaped; the broadcast body is
admin-authored HTML and is embedded as-is.
"""
from __future__ import annotations

import html
from typing import Any, Callable, Dict, List, Mapping, Tuple

from palmport.core.exceptions import ValidationError
from palmport.services.order_status import delivery_description, delivery_label

Rendered = Tuple[str, str]

_WRAPPER = (
    '<div style="font-family: \'Segoe UI\', Arial, sans-serif; line-height: 1.6; '
    'color: #333; max-width: 600px; margin: 0 auto; padding: 20px; '
    'background-color: #f9f6f2; border-radius: 10px;">{body}</div>'
)


def _e(value: Any) -> str:
    return html.escape("" if value is None else str(value))


def naira(amount: Any) -> str:
    try:
        return f"₦{float(amount):,.2f}"
    except (TypeError, ValueError):
        return "₦0.00"


def whatsapp_link(phone: str) -> str:
    """``wa.me`` link; local numbers with a leading 0 get the 234 country code."""
    digits = "".join(ch for ch in phone or "" if ch.isdigit())
    if digits.startswith("0"):
        digits = "234" + digits[1:]
    return f"https://wa.me/{digits}"


def _items_table(items: List[Mapping[str, Any]]) -> str:
    rows = "".join(
        "<tr>"
        f"<td>{_e(item.get('name'))}</td>"
        f"<td>{_e(item.get('size'))}</td>"
        f"<td>{_e(item.get('quantity'))}</td>"
        f"<td>{naira(item.get('total'))}</td>"
        "</tr>"
        for item in items
    )
    return (
        '<table style="width: 100%; border-collapse: collapse; margin: 15px 0;">'
        "<tr><th align=\"left\">Product</th><th align=\"left\">Size</th>"
        "<th align=\"left\">Qty</th><th align=\"left\">Total</th></tr>"
        f"{rows}</table>"
    )


def _amounts(ctx: Mapping[str, Any]) -> str:
    return (
        f"<p>Subtotal: {naira(ctx.get('subtotal'))}<br/>"
        f"Shipping: {naira(ctx.get('shipping'))}<br/>"
        f"<strong>Total: {naira(ctx.get('total'))}</strong></p>"
    )


def render_order_received_admin(ctx: Mapping[str, Any]) -> Rendered:
    assisted = ctx.get("order_type") == "assisted"
    type_label = "WhatsApp Order" if assisted else "Online Order"
    status_label = "Awaiting Contact" if assisted else "Pending Payment"
    action = (
        "Contact the customer on WhatsApp to confirm the order and arrange payment."
        if assisted
        else "Awaiting Paystack payment confirmation from the customer."
    )
    subject = f"🛒 New {type_label} - {ctx.get('order_number')} - {ctx.get('customer_name')}"
    body = (
        f"<h2 style=\"color: #D84727;\">New {type_label}</h2>"
        f"<p><strong>Order #:</strong> {_e(ctx.get('order_number'))}<br/>"
        f"<strong>Status:</strong> {status_label}</p>"
        f"<p><strong>Customer:</strong> {_e(ctx.get('customer_name'))}<br/>"
        f"<strong>Email:</strong> {_e(ctx.get('email'))}<br/>"
        f"<strong>Phone:</strong> {_e(ctx.get('phone'))}<br/>"
        f"<strong>Address:</strong> {_e(ctx.get('address'))}, {_e(ctx.get('city'))}, {_e(ctx.get('state'))}</p>"
        f"{_items_table(ctx.get('items') or [])}"
        f"{_amounts(ctx)}"
        f"<p><strong>Notes:</strong> {_e(ctx.get('notes') or 'None')}</p>"
        f"<p>{action}</p>"
    )
    if assisted:
        body += f'<p><a href="{_e(whatsapp_link(ctx.get("phone") or ""))}">Chat with customer on WhatsApp</a></p>'
    if ctx.get("dashboard_url"):
        body += f'<p><a href="{_e(ctx["dashboard_url"])}">Open admin dashboard</a></p>'
    return subject, _WRAPPER.format(body=body)


def render_order_status_update(ctx: Mapping[str, Any]) -> Rendered:
    new_status = ctx.get("new_status")
    label = delivery_label(new_status)
    subject = f"📦 Order Status Update - #{ctx.get('order_number')} - {label}"
    body = (
        f"<h2 style=\"color: #D84727;\">Order Status Update</h2>"
        f"<p>Hello {_e(ctx.get('customer_name'))},</p>"
        f"<p>The status of your order <strong>#{_e(ctx.get('order_number'))}</strong> has changed "
        f"from <strong>{_e(delivery_label(ctx.get('old_status')))}</strong> "
        f"to <strong>{_e(label)}</strong>.</p>"
        f"<p>{_e(delivery_description(new_status))}</p>"
        f"{_amounts(ctx)}"
        "<p>Thank you for choosing PalmPort!</p>"
    )
    return subject, _WRAPPER.format(body=body)


def render_payment_confirmed_customer(ctx: Mapping[str, Any]) -> Rendered:
    subject = f"✅ Payment Confirmed - #{ctx.get('order_number')}"
    body = (
        "<h2 style=\"color: #2f7a32;\">Payment received</h2>"
        f"<p>Hello {_e(ctx.get('customer_name'))},</p>"
        f"<p>We have received your payment for order <strong>#{_e(ctx.get('order_number'))}</strong>. "
        "We will start preparing it for shipment shortly.</p>"
        f"{_items_table(ctx.get('items') or [])}"
        f"{_amounts(ctx)}"
        f"<p>Payment reference: {_e(ctx.get('payment_reference'))}</p>"
    )
    return subject, _WRAPPER.format(body=body)


def render_payment_confirmed_admin(ctx: Mapping[str, Any]) -> Rendered:
    subject = f"💰 Payment Received - {ctx.get('order_number')} - {naira(ctx.get('total'))}"
    body = (
        "<h3>Payment confirmed</h3>"
        f"<p><strong>Order #:</strong> {_e(ctx.get('order_number'))}<br/>"
        f"<strong>Customer:</strong> {_e(ctx.get('customer_name'))} ({_e(ctx.get('email'))})<br/>"
        f"<strong>Reference:</strong> {_e(ctx.get('payment_reference'))}</p>"
        f"{_amounts(ctx)}"
    )
    if ctx.get("dashboard_url"):
        body += f'<p><a href="{_e(ctx["dashboard_url"])}">Open admin dashboard</a></p>'
    return subject, _WRAPPER.format(body=body)


def render_welcome_subscriber(ctx: Mapping[str, Any]) -> Rendered:
    body = (
        "<h2 style=\"color: #D84727;\">Thank you for subscribing!</h2>"
        "<p>We'll keep you updated on fresh palm oil batches, traceability, and PalmPort news.</p>"
    )
    return "Welcome to PalmPort Updates 🌴", _WRAPPER.format(body=body)


def render_welcome_customer(ctx: Mapping[str, Any]) -> Rendered:
    greeting = f"<p>Hello {_e(ctx['customer_name'])},</p>" if ctx.get("customer_name") else ""
    body = (
        "<h2 style=\"color: #D84727;\">Thank you for your order and welcome to PalmPort Updates!</h2>"
        f"{greeting}"
        "<p>We're excited to have you as a customer and will keep you updated on:</p>"
        "<ul>"
        "<li>🛒 Your order status and tracking</li>"
        "<li>🌱 New palm oil batches and traceability</li>"
        "<li>🎉 Special offers and promotions</li>"
        "<li>📰 PalmPort news and updates</li>"
        "</ul>"
        "<p>Thank you for choosing PalmPort!</p>"
    )
    return "Welcome to PalmPort Updates! 🌴", _WRAPPER.format(body=body)


def render_subscriber_alert_admin(ctx: Mapping[str, Any]) -> Rendered:
    body = f"<h3>New Subscription</h3><p><strong>Email:</strong> {_e(ctx.get('email'))}</p>"
    return f"New Subscriber: {ctx.get('email')}", _WRAPPER.format(body=body)


def render_broadcast(ctx: Mapping[str, Any]) -> Rendered:
    body = (
        f"{ctx.get('message') or ''}"
        '<hr style="margin-top:20px;" />'
        '<p style="font-size:12px; color:#666;">You received this from PalmPort.</p>'
    )
    return str(ctx.get("subject") or ""), _WRAPPER.format(body=body)


TEMPLATES: Dict[str, Callable[[Mapping[str, Any]], Rendered]] = {
    "order_received_admin": render_order_received_admin,
    "order_status_update": render_order_status_update,
    "payment_confirmed_customer": render_payment_confirmed_customer,
    "payment_confirmed_admin": render_payment_confirmed_admin,
    "welcome_subscriber": render_welcome_subscriber,
    "welcome_customer": render_welcome_customer,
    "subscriber_alert_admin": render_subscriber_alert_admin,
    "broadcast": render_broadcast,
}


def render(template: str, context: Mapping[str, Any]) -> Rendered:
    try:
        renderer = TEMPLATES[template]
    except KeyError:
        raise ValidationError(f"Unknown email template: {template}", details={"template": template}) from None
    return renderer(context)
