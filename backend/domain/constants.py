"""
Domain constants used across services/routers.
"""

# Prefix of the order id sent to the gateway ("order-id-42")
ORDER_ID_PREFIX = "order-id-"

TRANSACTION_NOT_FOUND_MESSAGE = "Transaction id not found"
