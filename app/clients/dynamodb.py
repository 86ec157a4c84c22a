"""
DynamoDB-backed document store.

Table layout:

- partition key ``pk`` (string) = ``<collection>#<lookup key>``, where the
  lookup key is ``token`` for credential sets and ``account_id`` for users,
  so a lookup by that field is a single ``GetItem``;
- attribute ``owner`` = ``<collection>#<account_id>``, the partition key of
  the GSI named by ``DYNAMODB_OWNER_INDEX`` (projection ALL), used for
  per-account queries and bulk revocation;
- attribute ``ttl`` in Unix seconds on credential documents, for the table's
  native TTL.
"""

from __future__ import annotations

from decimal import Decimal
from functools import reduce
from typing import Any, Dict, Iterator, Mapping, Optional

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import AWSSettings
from app.core.errors import StorageError
from app.models.oauth import CredentialKind
from app.models.user import USERS_COLLECTION

_STORAGE_ERRORS = (BotoCoreError, ClientError)
_INTERNAL_ATTRIBUTES = ("pk", "owner")

OWNER_FIELD = "account_id"
DEFAULT_KEY_FIELDS: Dict[str, str] = {
    **{kind.collection: "token" for kind in CredentialKind},
    USERS_COLLECTION: "account_id",
}


def _from_dynamo(item: Dict[str, Any]) -> Dict[str, Any]:
    document = {k: v for k, v in item.items() if k not in _INTERNAL_ATTRIBUTES}
    for key, value in document.items():
        if isinstance(value, Decimal):
            document[key] = int(value) if value == value.to_integral_value() else float(value)
    return document


def _matches(item: Dict[str, Any], filters: Dict[str, Any]) -> bool:
    return all(item.get(field) == value for field, value in filters.items())


class DynamoDBClient:
    """Collection-scoped CRUD over a single DynamoDB table."""

    def __init__(
        self,
        settings: AWSSettings,
        table: Any = None,
        key_fields: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._settings = settings
        self._key_fields = dict(key_fields or DEFAULT_KEY_FIELDS)
        if table is None:
            resource = boto3.resource("dynamodb", region_name=settings.region_name)
            table = resource.Table(settings.dynamodb_table_name)
        self._table = table

    def _key_field(self, collection: str) -> str:
        try:
            return self._key_fields[collection]
        except KeyError:
            raise ValueError(f"No lookup key configured for {collection}") from None

    def _key(self, collection: str, value: Any) -> Dict[str, str]:
        return {"pk": f"{collection}#{value}"}

    def _by_owner(self, collection: str, filters: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
        rest = {field: value for field, value in filters.items() if field != OWNER_FIELD}
        kwargs: Dict[str, Any] = {
            "IndexName": self._settings.dynamodb_owner_index,
            "KeyConditionExpression": Key("owner").eq(f"{collection}#{filters[OWNER_FIELD]}"),
        }
        if rest:
            kwargs["FilterExpression"] = reduce(
                lambda acc, cond: acc & cond,
                [Attr(field).eq(value) for field, value in rest.items()],
            )
        while True:
            response = self._table.query(**kwargs)
            yield from response.get("Items", [])
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return
            kwargs["ExclusiveStartKey"] = last_key

    def _lookup(self, collection: str, filters: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
        """Resolve ``filters`` through the primary key, else through the owner index."""
        key_field = self._key_field(collection)
        if key_field in filters:
            response = self._table.get_item(
                Key=self._key(collection, filters[key_field]), ConsistentRead=True
            )
            item = response.get("Item")
            if item is not None and _matches(item, filters):
                yield item
            return
        if OWNER_FIELD in filters:
            yield from self._by_owner(collection, filters)
            return
        raise ValueError(
            f"{collection} can only be filtered by {key_field!r} or {OWNER_FIELD!r}"
        )

    def insert_one(self, collection: str, document: Dict[str, Any]) -> None:
        key_value = document[self._key_field(collection)]
        item = {**document, **self._key(collection, key_value)}
        if OWNER_FIELD in document:
            item["owner"] = f"{collection}#{document[OWNER_FIELD]}"
        try:
            self._table.put_item(Item=item, ConditionExpression=Attr("pk").not_exists())
        except _STORAGE_ERRORS as exc:
            raise StorageError(f"insert into {collection} failed: {exc}") from exc

    def find_one(
        self, collection: str, filters: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        try:
            for item in self._lookup(collection, filters):
                return _from_dynamo(item)
        except _STORAGE_ERRORS as exc:
            raise StorageError(f"lookup in {collection} failed: {exc}") from exc
        return None

    def delete_one(self, collection: str, filters: Dict[str, Any]) -> int:
        key_field = self._key_field(collection)
        try:
            if set(filters) == {key_field}:
                response = self._table.delete_item(
                    Key=self._key(collection, filters[key_field]), ReturnValues="ALL_OLD"
                )
                return 1 if response.get("Attributes") else 0
            for item in self._lookup(collection, filters):
                self._table.delete_item(Key={"pk": item["pk"]})
                return 1
        except _STORAGE_ERRORS as exc:
            raise StorageError(f"delete from {collection} failed: {exc}") from exc
        return 0

    def delete_many(self, collection: str, filters: Dict[str, Any]) -> int:
        deleted = 0
        try:
            items = list(self._lookup(collection, filters))
            with self._table.batch_writer() as batch:
                for item in items:
                    batch.delete_item(Key={"pk": item["pk"]})
                    deleted += 1
        except _STORAGE_ERRORS as exc:
            raise StorageError(f"delete from {collection} failed: {exc}") from exc
        return deleted


__all__ = ["DEFAULT_KEY_FIELDS", "DynamoDBClient", "OWNER_FIELD"]
