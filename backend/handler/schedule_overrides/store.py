import json
from typing import Any, Dict, List, Optional, Protocol

import boto3
from boto3.dynamodb.conditions import Key

from .settings import Settings


class BlobStore(Protocol):
    """Opaque key-value store; values are UTF-8 text."""

    def get(self, key: str) -> Optional[str]: ...

    def set_json(self, key: str, value: Any) -> None: ...

    def list_keys(self) -> List[str]: ...

    def delete(self, key: str) -> None: ...


# ---- DynamoDB ----------------------------------------------------------------

class DynamoBlobStore:
    """
    One store is one partition of the table:
    pk = STORE#<name>, sk = <key>, value = <json text>.
    """

    def __init__(self, table, name: str = "overrides"):
        self.table = table
        self.pk = f"STORE#{name}"

    def get(self, key: str) -> Optional[str]:
        item = self.table.get_item(Key={"pk": self.pk, "sk": key}).get("Item")
        if not item:
            return None
        return item.get("value")

    def set_json(self, key: str, value: Any) -> None:
        self.table.put_item(Item={
            "pk": self.pk,
            "sk": key,
            "value": json.dumps(value),
        })

    def list_keys(self) -> List[str]:
        keys: List[str] = []
        query: Dict[str, Any] = {
            "KeyConditionExpression": Key("pk").eq(self.pk),
            "ProjectionExpression": "sk",
        }
        while True:
            resp_ = self.table.query(**query)
            keys.extend(it["sk"] for it in resp_.get("Items") or [] if it.get("sk"))
            last = resp_.get("LastEvaluatedKey")
            if not last:
                return keys
            query["ExclusiveStartKey"] = last

    def delete(self, key: str) -> None:
        # delete_item on a missing key is a no-op
        self.table.delete_item(Key={"pk": self.pk, "sk": key})


def dynamo_store(settings: Settings) -> DynamoBlobStore:
    if not settings.table_name:
        raise RuntimeError("Missing required environment variable: TABLE_NAME")
    ddb = boto3.resource("dynamodb")
    return DynamoBlobStore(ddb.Table(settings.table_name), settings.store_name)


# ---- In-memory ---------------------------------------------------------------

class InMemoryBlobStore:
    """Dict-backed store for local runs and tests. Keeps insertion order."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.blobs: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.blobs.get(key)

    def set_json(self, key: str, value: Any) -> None:
        self.blobs[key] = json.dumps(value)

    def list_keys(self) -> List[str]:
        return list(self.blobs)

    def delete(self, key: str) -> None:
        self.blobs.pop(key, None)
