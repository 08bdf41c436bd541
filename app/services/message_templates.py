"""
WhatsApp message templates for order status notifications

Texts are in Portuguese (customers are in Brazil).
"""
from typing import Dict, Optional

from app.domain.integration import IntegrationSettings, describe_store_hours
from app.domain.money import format_brl
from app.domain.order import Order

CONFIRMATION_STATUSES = {"pending", "paid", "confirmed"}
PACKING_STATUSES = {"packing"}
DISPATCH_STATUSES = {"sent", "shipped", "delivered"}


def packing_detail(order: Order, category_types: Dict[int, str]) -> str:
    """
    What the packing team is checking, based on the ordered categories

    Args:
        order: The order being packed
        category_types: category_id -> type (supplement, clothing, other)
    """
    types = {category_types.get(item.category_id) for item in order.items if item.category_id}
    has_supplement = "supplement" in types
    has_clothing = "clothing" in types

    if has_supplement and has_clothing:
        return "seus suplementos e o tamanho das suas roupas"
    if has_supplement:
        return "seus suplementos e a integridade dos lacres"
    if has_clothing:
        return "as peças e os tamanhos das suas roupas"
    return "seus produtos com todo cuidado"


def _customer_first_name(order: Order) -> str:
    name = (order.user_name or "").strip()
    return name.split()[0] if name else "Cliente"


def build_whatsapp_message(
    order: Order,
    status: str,
    settings: Optional[IntegrationSettings] = None,
    category_types: Optional[Dict[int, str]] = None,
    store_city: str = "Caconde"
) -> Optional[str]:
    """
    Build the customer message for a status change

    Returns:
        Message text, or None when the status has no message
    """
    status = (status or "").lower()
    customer = _customer_first_name(order)
    items_list = ", ".join(f"{item.quantity}x {item.name}" for item in order.items)
    total = format_brl(order.total)
    city = order.city or "sua região"

    if status in CONFIRMATION_STATUSES:
        if order.is_pickup:
            return (
                f"✅ Pedido Confirmado para Retirada!\n\n"
                f"Olá {customer}, recebemos seu pedido!\n"
                f"🛒 Itens: {items_list}\n"
                f"💰 Total: {total}\n\n"
                f"Aguarde: Enviaremos uma mensagem assim que tudo estiver separado "
                f"para você vir buscar aqui na loja em {store_city}."
            )
        return (
            f"✅ Pedido Confirmado!\n\n"
            f"Olá {customer}, seu kit de performance já está no nosso sistema!\n"
            f"🛒 Itens: {items_list}\n"
            f"🚚 Envio para: {city}\n"
            f"💰 Total: {total}\n\n"
            f"Avisaremos você assim que iniciarmos a embalagem."
        )

    if status in PACKING_STATUSES:
        detail = packing_detail(order, category_types or {})
        return (
            f"📦 Seu pedido está sendo embalado!\n\n"
            f"Estamos conferindo {detail} com todo cuidado. "
            f"O seu pacote está sendo preparado para o envio ou retirada!"
        )

    if status in DISPATCH_STATUSES:
        if order.is_pickup:
            store_address = (settings.store_address if settings else None) or "[Endereço da Loja]"
            store_hours = describe_store_hours(settings.store_hours if settings else None) or "[Horário]"
            return (
                f"🏪 Tudo pronto! Pode vir retirar.\n\n"
                f"Seu pedido já está embalado e te esperando no balcão.\n"
                f"📍 Loja: {store_address}\n"
                f"⏰ Horário: {store_hours}\n\n"
                f"É só chegar e informar seu nome ou o número do pedido: #{order.short_id}."
            )
        return (
            f"🛵 Seu pedido saiu para entrega!\n\n"
            f"O entregador já está a caminho de {city}. Logo você terá seus produtos "
            f"em mãos para o seu treino ou dia a dia! 💪"
        )

    return None
