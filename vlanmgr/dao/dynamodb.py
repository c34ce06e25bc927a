"""
DynamoDB implementation of ConfigStore.

All DynamoDB-specific concerns (boto3 resource setup, table bootstrapping,
conditional writes and pagination) live here, keeping the VLAN services
storage-agnostic.

Table schema
────────────
  Table name    : vlan_config  (configurable via VLANMGR_DYNAMODB_TABLE_NAME)
  Partition key : config_table  (String)   logical table, e.g. "VLAN"
  Sort key      : entry_key     (String)   row key, e.g. "Vlan10"
  Attribute     : fields        (Map)      the row itself

Every logical table is one partition, so ``get_keys`` is a single paginated
Query and keys come back in sort-key order.  All reads are strongly consistent:
every write starts from the VLAN row it has just read.
"""

import logging
from typing import Optional

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from vlanmgr.config import settings
from vlanmgr.dao.base import ConfigStore, EntryExistsError, EntryNotFoundError

logger = logging.getLogger(__name__)

PARTITION_KEY = "config_table"
SORT_KEY = "entry_key"
FIELDS_ATTR = "fields"


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")


class DynamoDBConfigStore(ConfigStore):
    """
    ConfigStore backed by Amazon DynamoDB.

    The table handle is created lazily on first use so that importing this
    module does not require live AWS credentials.
    """

    def __init__(self, table_name: Optional[str] = None) -> None:
        self._table_name = table_name or settings.dynamodb_table_name
        self._table = None  # populated on first access via _get_table()

    # ── Internal helpers ──────────────────────────────────────────────────────

    def _build_resource(self):
        """Create a boto3 DynamoDB resource from application settings."""
        kwargs: dict = {"region_name": settings.aws_region}
        if settings.aws_access_key_id:
            kwargs["aws_access_key_id"] = settings.aws_access_key_id
            kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
        if settings.dynamodb_endpoint_url:
            kwargs["endpoint_url"] = settings.dynamodb_endpoint_url
        return boto3.resource("dynamodb", **kwargs)

    def _get_table(self):
        """
        Return the DynamoDB Table handle, creating the table if it does not
        yet exist.  The handle is cached after the first successful call.
        """
        if self._table is not None:
            return self._table

        ddb = self._build_resource()
        try:
            table = ddb.create_table(
                TableName=self._table_name,
                KeySchema=[
                    {"AttributeName": PARTITION_KEY, "KeyType": "HASH"},
                    {"AttributeName": SORT_KEY, "KeyType": "RANGE"},
                ],
                AttributeDefinitions=[
                    {"AttributeName": PARTITION_KEY, "AttributeType": "S"},
                    {"AttributeName": SORT_KEY, "AttributeType": "S"},
                ],
                BillingMode="PAY_PER_REQUEST",
            )
            table.wait_until_exists()
            logger.info("DynamoDB table '%s' created.", self._table_name)
        except ClientError as exc:
            if _error_code(exc) == "ResourceInUseException":
                table = ddb.Table(self._table_name)
            else:
                raise

        self._table = table
        return self._table

    @staticmethod
    def _item_key(table: str, key: str) -> dict:
        return {PARTITION_KEY: table, SORT_KEY: key}

    # ── ConfigStore interface ─────────────────────────────────────────────────

    def get_entry(self, table: str, key: str) -> dict:
        try:
            response = self._get_table().get_item(
                Key=self._item_key(table, key),
                ConsistentRead=True,
            )
        except ClientError as exc:
            logger.error("DynamoDB GetItem failed for %s|%s: %s", table, key, exc)
            raise
        item = response.get("Item")
        if item is None:
            raise EntryNotFoundError(table, key)
        return dict(item.get(FIELDS_ATTR, {}))

    def get_keys(self, table: str) -> list[str]:
        """
        Return all keys of *table*.

        Handles pagination transparently - Query is re-issued until
        ``LastEvaluatedKey`` is absent from the response.
        """
        ddb_table = self._get_table()
        condition = Key(PARTITION_KEY).eq(table)
        try:
            response = ddb_table.query(KeyConditionExpression=condition, ConsistentRead=True)
            items: list[dict] = response.get("Items", [])

            while "LastEvaluatedKey" in response:
                response = ddb_table.query(
                    KeyConditionExpression=condition,
                    ConsistentRead=True,
                    ExclusiveStartKey=response["LastEvaluatedKey"],
                )
                items.extend(response.get("Items", []))
        except ClientError as exc:
            logger.error("DynamoDB Query failed for table '%s': %s", table, exc)
            raise
        return [item[SORT_KEY] for item in items]

    def create_entry(self, table: str, key: str, fields: dict) -> None:
        """PutItem guarded by ``attribute_not_exists`` on the sort key."""
        item = {**self._item_key(table, key), FIELDS_ATTR: fields}
        try:
            self._get_table().put_item(
                Item=item,
                ConditionExpression=f"attribute_not_exists({SORT_KEY})",
            )
        except ClientError as exc:
            if _error_code(exc) == "ConditionalCheckFailedException":
                raise EntryExistsError(table, key) from exc
            logger.error("DynamoDB PutItem failed for %s|%s: %s", table, key, exc)
            raise
        logger.debug("Created %s|%s.", table, key)

    def mod_entry(self, table: str, key: str, fields: dict) -> None:
        """Unconditional PutItem: an existing row is completely replaced."""
        item = {**self._item_key(table, key), FIELDS_ATTR: fields}
        try:
            self._get_table().put_item(Item=item)
        except ClientError as exc:
            logger.error("DynamoDB PutItem failed for %s|%s: %s", table, key, exc)
            raise
        logger.debug("Wrote %s|%s.", table, key)

    def delete_entry(self, table: str, key: str) -> None:
        """
        Delete the row under *key*.

        ``ReturnValues="ALL_OLD"`` tells us whether the item existed, so an
        absent key surfaces as ``EntryNotFoundError`` like the other backends.
        """
        try:
            response = self._get_table().delete_item(
                Key=self._item_key(table, key),
                ReturnValues="ALL_OLD",
            )
        except ClientError as exc:
            logger.error("DynamoDB DeleteItem failed for %s|%s: %s", table, key, exc)
            raise
        if not response.get("Attributes"):
            raise EntryNotFoundError(table, key)
        logger.debug("Deleted %s|%s.", table, key)
