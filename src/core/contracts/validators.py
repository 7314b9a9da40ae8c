"""
Контракты ответов Sui JSON-RPC

Формы ответов, на которые опирается pipeline, описаны JSON Schema файлами
в contracts/schema/ и проверяются библиотекой jsonschema:
- pool_object         — result.data метода sui_getObject (объект пула)
- transaction_page    — result метода suix_queryTransactionBlocks
- dynamic_field_page  — result метода suix_getDynamicFields

Нарушение схемы само по себе не бросает exception: вызывающий код решает,
фатально ли оно (decode шаг пагинации, загрузка объекта пула).
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator, List

import jsonschema
from jsonschema import ValidationError
from jsonschema.validators import validator_for


SCHEMA_DIR = Path(__file__).parent / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """Чтение и meta-валидация схем из каталога (с кэшем по имени)."""

    def __init__(self, schema_dir: Path | None = None):
        self.schema_dir = Path(schema_dir) if schema_dir is not None else SCHEMA_DIR
        if not self.schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self.schema_dir}")
        self._cache: Dict[str, Dict[str, Any]] = {}

    def available(self) -> List[str]:
        """Имена всех схем каталога (без .json)."""
        return sorted(path.stem for path in self.schema_dir.glob("*.json"))

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Схема по имени.

        Raises:
            FileNotFoundError: файла схемы нет
            ValueError: файл не является корректной JSON Schema
        """
        cached = self._cache.get(schema_name)
        if cached is not None:
            return cached

        path = self.schema_dir / f"{schema_name}.json"
        if not path.is_file():
            raise FileNotFoundError(f"Schema not found: {path}")

        schema = json.loads(path.read_text(encoding="utf-8"))
        try:
            validator_for(schema).check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {path.name}: {e.message}") from e

        self._cache[schema_name] = schema
        return schema


_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Проверка одного JSON значения против именованной схемы.

    Класс валидатора (draft) выбирается по полю $schema самой схемы.
    """

    def __init__(self, schema_name: str, loader: SchemaLoader | None = None):
        self.schema_name = schema_name
        self.schema = (loader or _LOADER).load_schema(schema_name)
        self.validator = validator_for(self.schema)(self.schema)

    def validate(self, data: Any) -> None:
        """
        Raises:
            ValidationError: первое найденное нарушение схемы
        """
        self.validator.validate(data)

    def is_valid(self, data: Any) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Any) -> Iterator[ValidationError]:
        return self.validator.iter_errors(data)

    def error_messages(self, data: Any) -> List[str]:
        """Нарушения в виде "path: message", упорядоченные по пути."""
        errors = sorted(self.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
        return [
            f"{'/'.join(str(p) for p in error.absolute_path) or '<root>'}: {error.message}"
            for error in errors
        ]

    def describe_errors(self, data: Any) -> str:
        """Все нарушения одной строкой для логов и сообщений ошибок."""
        return "; ".join(self.error_messages(data))


class PoolObjectValidator(ContractValidator):
    """content.fields.unclaimed.{type, fields: {id: {id}, size}}"""

    def __init__(self):
        super().__init__("pool_object")


class TransactionPageValidator(ContractValidator):
    """Страница suix_queryTransactionBlocks: data[], hasNextPage, nextCursor."""

    def __init__(self):
        super().__init__("transaction_page")


class DynamicFieldPageValidator(ContractValidator):
    """Страница suix_getDynamicFields: name.value каждой записи — адрес."""

    def __init__(self):
        super().__init__("dynamic_field_page")


# =============================================================================
# SHORTCUTS
# =============================================================================


@lru_cache(maxsize=None)
def _shared(validator_cls: type) -> ContractValidator:
    return validator_cls()


def validate_pool_object(data: Any) -> None:
    """Raises ValidationError, если result.data не объект пула."""
    _shared(PoolObjectValidator).validate(data)


def validate_transaction_page(data: Any) -> None:
    """Raises ValidationError, если result не страница транзакций."""
    _shared(TransactionPageValidator).validate(data)


def validate_dynamic_field_page(data: Any) -> None:
    """Raises ValidationError, если result не страница dynamic fields."""
    _shared(DynamicFieldPageValidator).validate(data)
