"""
Contract Validation Module

Модуль для валидации JSON ответов RPC против JSON Schema контрактов.
"""

from .validators import (
    ContractValidator,
    DynamicFieldPageValidator,
    PoolObjectValidator,
    SchemaLoader,
    TransactionPageValidator,
    validate_dynamic_field_page,
    validate_pool_object,
    validate_transaction_page,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "PoolObjectValidator",
    "TransactionPageValidator",
    "DynamicFieldPageValidator",
    # Functions
    "validate_pool_object",
    "validate_transaction_page",
    "validate_dynamic_field_page",
]
