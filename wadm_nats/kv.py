"""
JetStream Key-Value Bucket Provisioning
"""

import logging

from nats.errors import Error as NatsError
from nats.js import JetStreamContext
from nats.js.api import KeyValueConfig, StorageType
from nats.js.errors import APIError
from nats.js.errors import Error as JetStreamError
from nats.js.kv import KeyValue

from wadm_nats.errors import ProvisioningError
from wadm_nats.streams import STREAM_NAME_IN_USE
from wadm_nats.telemetry import create_span, increment_counter

logger = logging.getLogger(__name__)

# Per-key history limit enforced by the server
MAX_HISTORY = 64


def kv_bucket_config(name: str, history_to_keep: int) -> KeyValueConfig:
    return KeyValueConfig(
        bucket=name,
        history=history_to_keep,
        replicas=1,
        storage=StorageType.FILE,
    )


async def ensure_kv_bucket(js: JetStreamContext, name: str, history_to_keep: int) -> KeyValue:
    """Ensure a key-value bucket exists, creating it if it cannot be fetched

    An existing bucket is returned as-is, whatever its history setting;
    ``history_to_keep`` only applies (and is only validated) when the bucket
    gets created.

    Args:
        js: JetStream context
        name: Bucket name
        history_to_keep: Number of revisions to keep per key (1-64)

    Returns:
        KeyValue: Handle to the bucket

    Raises:
        ProvisioningError: If the fetch fails outside JetStream, or the bucket
            must be created and the history is out of range or creation fails
    """
    attrs = {"kind": "kv_bucket", "name": name}

    with create_span("wadm_nats.ensure_kv_bucket", attrs):
        try:
            kv = await js.key_value(name)
            logger.info(f"Using existing key-value bucket: {name}")
            increment_counter("wadm_nats.resources.reused", 1, attrs)
            return kv
        except JetStreamError as e:
            logger.debug(f"Key-value bucket {name} not available ({e!r}), creating it")
        except NatsError as e:
            logger.error(f"Error occurred while fetching key-value bucket {name}: {e!r}")
            raise ProvisioningError(f"Unable to look up key-value bucket {name}: {e!r}", resource=name) from e

        if not 1 <= history_to_keep <= MAX_HISTORY:
            raise ProvisioningError(
                f"Invalid history {history_to_keep} for bucket {name}, must be between 1 and {MAX_HISTORY}",
                resource=name,
            )

        try:
            kv = await js.create_key_value(config=kv_bucket_config(name, history_to_keep))
        except NatsError as e:
            if isinstance(e, APIError) and e.err_code == STREAM_NAME_IN_USE:
                logger.warning(f"Key-value bucket {name} was created concurrently, using existing bucket")
                increment_counter("wadm_nats.resources.reused", 1, attrs)
                return await js.key_value(name)
            logger.error(f"Error occurred while creating key-value bucket {name}: {e!r}")
            raise ProvisioningError(f"Unable to create key-value bucket {name}: {e!r}", resource=name) from e

        logger.info(f"Created new key-value bucket: {name} (history: {history_to_keep})")
        increment_counter("wadm_nats.resources.created", 1, attrs)
        return kv
