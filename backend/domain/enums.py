"""
Domain enums for gateway transaction states and persisted order states.
"""

from enum import Enum


class TransactionStatus(str, Enum):
    CAPTURE = "capture"
    SETTLEMENT = "settlement"
    CANCEL = "cancel"
    DENY = "deny"
    EXPIRE = "expire"
    PENDING = "pending"
    REFUND = "refund"


class FraudStatus(str, Enum):
    CHALLENGE = "challenge"
    ACCEPT = "accept"


class OrderStatus(str, Enum):
    CHALLENGE = "challenge"
    ACCEPT = "accept"
    SETTLEMENT = "settlement"
    FAILURE = "failure"
    PENDING = "pending"
    REFUND = "refund"


class OrderStoreBackend(str, Enum):
    SQL = "sql"
    FIRESTORE = "firestore"
