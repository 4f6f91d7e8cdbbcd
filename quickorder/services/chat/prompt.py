"""Bot prompt templates for each step of the intake script."""
from typing import Sequence

from quickorder.services.orders.models import OrderDraft


def _step(name: str, instruction: str) -> str:
    return f"CONVERSATION STEP: {name}\n{instruction}"


def get_greeting_prompt(bot_name: str) -> str:
    """Prompt for the opening message."""
    return _step(
        "GREETING",
        f"You are a friendly WhatsApp chatbot for a service called '{bot_name}'. "
        f"Start the conversation by greeting the user and asking for their name to begin an order.",
    )


def get_ask_item_prompt(name: str, menu_text: str = "") -> str:
    """Prompt after the customer gave their name."""
    menu_context = f" Here is our menu:\n{menu_text}\n\n" if menu_text else " "
    return _step(
        "ASK_ITEM",
        f"The user's name is {name}. Welcome them by name.{menu_context}"
        f"Please ask them what they would like to order.",
    )


def get_ask_address_prompt(item: str) -> str:
    """Prompt after the customer named an item."""
    return _step(
        "ASK_ADDRESS",
        f'The user wants to order: "{item}". Acknowledge the item and ask for their delivery address.',
    )


def get_ask_payment_prompt(address: str, payment_methods: Sequence[str]) -> str:
    """Prompt after the customer gave an address."""
    return _step(
        "ASK_PAYMENT",
        f'The user\'s address is "{address}". Ask how they would like to pay. '
        f"The options are: {', '.join(payment_methods)}.",
    )


def get_payment_retry_prompt(user_input: str, payment_methods: Sequence[str]) -> str:
    """Prompt when the payment answer matched no option."""
    return _step(
        "ASK_PAYMENT_RETRY",
        f'The user answered "{user_input}", which is not one of our payment options. '
        f"Politely ask them to choose one of: {', '.join(payment_methods)}.",
    )


def get_confirmation_prompt(draft: OrderDraft) -> str:
    """Prompt presenting the order summary."""
    return _step(
        "CONFIRMATION",
        f"Present this order summary for confirmation:\n{draft.get_summary()}\n"
        f"Ask them to type 'yes' to confirm or 'no' to cancel.",
    )


def get_final_confirmation_prompt(draft: OrderDraft) -> str:
    """Prompt after the customer typed yes."""
    return _step(
        "FINAL_CONFIRMATION",
        f"The user typed yes for this order:\n{draft.get_summary()}\n"
        f"Ask them to press the confirm button to place it.",
    )


def get_order_placed_prompt() -> str:
    """Prompt after the order was created."""
    return _step(
        "ORDER_PLACED",
        "The user confirmed the order. Thank them and let them know their order has been "
        "placed successfully. Tell them they will be notified here once an admin approves it.",
    )


def get_order_rejected_prompt() -> str:
    """Prompt after the customer declined the summary."""
    return _step(
        "ORDER_REJECTED",
        "The user cancelled the order. Apologize and ask if they would like to start over.",
    )
