"""
Message bodies for customer and admin notifications.

WhatsApp bodies use the provider's *bold* markup. Emails are sent with both
an html and a plain text part.
"""

from datetime import datetime
from html import escape

from order_notifications.config import Settings
from order_notifications.domain.models import EmailContent, Order, StatusDisplay


def format_amount(total: int) -> str:
    """XOF has no minor unit: 15000 -> '15 000'."""
    return f"{total:,}".replace(",", " ")


def format_datetime(value: datetime | None) -> str:
    if value is None:
        return "N/A"
    return value.strftime("%d/%m/%Y %H:%M")


def order_tracking_url(settings: Settings, order_id: str) -> str:
    return f"{settings.SITE_URL.rstrip('/')}/orders/{order_id}"


def admin_order_url(settings: Settings, order_id: str) -> str:
    return f"{settings.SITE_URL.rstrip('/')}/admin/orders-page/{order_id}"


def status_update_whatsapp(
    order: Order,
    display: StatusDisplay,
    is_guest_customer: bool,
    settings: Settings,
) -> str:
    if is_guest_customer:
        follow_up = "💬 Pour toute question, contactez-nous"
    else:
        follow_up = f"🔗 Suivre votre commande: {order_tracking_url(settings, order.id)}"

    return (
        f"{display.emoji} *MISE À JOUR DE COMMANDE*\n\n"
        f"Bonjour {order.customer_name},\n\n"
        f"Votre commande #{order.id} est maintenant *{display.phrase}*.\n\n"
        f"{follow_up}\n\n"
        f"📞 *Information:* {settings.SUPPORT_PHONE}\n\n"
        f"*{settings.STORE_NAME}*"
    )


def status_update_email(
    order: Order,
    display: StatusDisplay,
    is_guest_customer: bool,
    settings: Settings,
) -> EmailContent:
    name = escape(order.customer_name)
    if is_guest_customer:
        follow_up = "Pour toute question, répondez simplement à cet email."
        follow_up_html = escape(follow_up)
    else:
        url = order_tracking_url(settings, order.id)
        follow_up = f"Suivez votre commande : {url}"
        follow_up_html = f'<a href="{escape(url)}">Suivre ma commande</a>'

    subject = f"{display.emoji} Mise à jour de commande #{order.id} - {settings.STORE_NAME}"
    html = (
        f"<h1>{display.emoji} Mise à jour de commande</h1>"
        f"<p>Bonjour {name},</p>"
        f"<p>Votre commande #{escape(order.id)} est maintenant <b>{escape(display.phrase)}</b>.</p>"
        f"<p>{escape(display.description)}.</p>"
        f"<p>{follow_up_html}</p>"
    )
    text = (
        f"{display.emoji} MISE À JOUR DE COMMANDE\n"
        f"Bonjour {order.customer_name},\n"
        f"Votre commande #{order.id} est maintenant {display.phrase}.\n"
        f"{follow_up}\n"
        f"{settings.STORE_NAME}"
    )
    return EmailContent(subject=subject, html=html, text=text)


def order_received_whatsapp(order: Order, settings: Settings) -> str:
    return (
        f"🛒 *NOUVELLE COMMANDE REÇUE*\n\n"
        f"📋 *Commande #{order.id}*\n"
        f"👤 *Client:* {order.shipping_address.name or 'Client invité'}\n"
        f"📞 *Téléphone:* {order.customer_phone or 'Non fourni'}\n"
        f"💰 *Montant:* {format_amount(order.total)} FCFA\n"
        f"📅 *Date:* {format_datetime(order.created_at)}\n\n"
        f"🔗 Voir les détails: {admin_order_url(settings, order.id)}\n\n"
        f"Répondez rapidement pour confirmer la commande !"
    )


def order_received_email(order: Order, settings: Settings) -> EmailContent:
    customer = order.shipping_address.name or "Client invité"
    address = order.shipping_address.address or "Non fourni"
    url = admin_order_url(settings, order.id)
    amount = format_amount(order.total)
    created = format_datetime(order.created_at)

    subject = f"🛒 Nouvelle Commande #{order.id} - {customer}"
    html = (
        f"<h2>Nouvelle commande reçue</h2>"
        f"<p><b>Commande #{escape(order.id)}</b></p>"
        f"<p>Date : <b>{created}</b><br>Total : <b>{amount} FCFA</b></p>"
        f"<p>Client : {escape(customer)}<br>{escape(address)}</p>"
        f'<p><a href="{escape(url)}">Voir la commande</a></p>'
    )
    text = (
        f"Nouvelle Commande Reçue - {settings.STORE_NAME}\n\n"
        f"Commande #{order.id}\n"
        f"Date: {created}\n"
        f"Total: {amount} FCFA\n"
        f"Client: {customer}\n"
        f"Adresse: {address}\n\n"
        f"Voir la commande: {url}"
    )
    return EmailContent(subject=subject, html=html, text=text)


def order_confirmation_whatsapp(order: Order, settings: Settings) -> str:
    return (
        f"✅ *CONFIRMATION DE COMMANDE*\n\n"
        f"Bonjour {order.customer_name},\n\n"
        f"Nous avons bien reçu votre commande #{order.id} d'un montant de {format_amount(order.total)} FCFA.\n\n"
        f"📦 *Prochaines étapes:*\n"
        f"1. Nous vous contacterons pour confirmer les détails\n"
        f"2. Préparation et expédition de votre commande\n\n"
        f"📞 *Contact:* {settings.SUPPORT_PHONE}\n"
        f"📧 *Email:* {settings.SUPPORT_EMAIL}\n\n"
        f"Merci pour votre confiance ! 🛍️\n\n"
        f"*{settings.STORE_NAME}*"
    )


def payment_failed_whatsapp(order: Order, settings: Settings) -> str:
    return (
        f"❌ *PAIEMENT ÉCHOUÉ*\n\n"
        f"📋 *Commande #{order.id}*\n"
        f"👤 *Client:* {order.shipping_address.name or 'Client invité'}\n"
        f"💰 *Montant:* {format_amount(order.total)} FCFA\n\n"
        f"🔗 Voir les détails: {admin_order_url(settings, order.id)}\n\n"
        f"Contactez le client pour résoudre le problème."
    )


def connection_test_whatsapp(settings: Settings, now: datetime) -> str:
    return (
        f"🧪 *TEST DE CONNEXION WHATSAPP*\n\n"
        f"Ceci est un message de test pour vérifier la configuration WhatsApp de {settings.STORE_NAME}.\n\n"
        f"✅ Si vous recevez ce message, la configuration est correcte !\n\n"
        f"*Timestamp:* {format_datetime(now)}"
    )


def connection_test_email(settings: Settings) -> EmailContent:
    return EmailContent(
        subject=f"🧪 Test Email - {settings.STORE_NAME}",
        html="<h1>Test Email</h1><p>Ceci est un test de la configuration email.</p>",
        text="Ceci est un test de la configuration email.",
    )
