"""
JetStream Stream Provisioning

Ensures the streams wadm relies on exist. Each ``ensure_*`` call returns the
existing stream untouched when it is already there, and otherwise creates it
from one of three fixed configurations:

- work queue streams: every message is consumed once, then removed
- status stream: keeps the latest few messages per subject, never expires
- notify stream: kept only while some consumer is interested
"""

import logging
from typing import List, Optional

from nats.errors import Error as NatsError
from nats.js import JetStreamContext
from nats.js.api import RetentionPolicy, StorageType, StreamConfig, StreamInfo
from nats.js.errors import APIError, NotFoundError

from wadm_nats.errors import ProvisioningError
from wadm_nats.telemetry import create_span, increment_counter

logger = logging.getLogger(__name__)

# Max age (seconds) for messages in the work queue and notify streams
DEFAULT_EXPIRY_TIME = 10 * 60

STATUS_STREAM_DESCRIPTION = "A stream that stores all status updates for wadm applications"
NOTIFY_STREAM_DESCRIPTION = "A stream for capturing all notification events for wadm"
STATUS_MAX_MSGS_PER_SUBJECT = 10

# JetStream API error returned when a stream with the same name already exists
STREAM_NAME_IN_USE = 10058


def work_queue_stream_config(name: str, subjects: List[str],
                             description: Optional[str] = None) -> StreamConfig:
    return StreamConfig(
        name=name,
        description=description,
        subjects=list(subjects),
        num_replicas=1,
        retention=RetentionPolicy.WORK_QUEUE,
        max_age=DEFAULT_EXPIRY_TIME,
        storage=StorageType.FILE,
        allow_rollup_hdrs=False,
    )


def status_stream_config(name: str, subjects: List[str]) -> StreamConfig:
    # max_age of 0 means status messages never expire by age
    return StreamConfig(
        name=name,
        description=STATUS_STREAM_DESCRIPTION,
        subjects=list(subjects),
        num_replicas=1,
        allow_direct=True,
        retention=RetentionPolicy.LIMITS,
        max_msgs_per_subject=STATUS_MAX_MSGS_PER_SUBJECT,
        max_age=0,
        storage=StorageType.FILE,
        allow_rollup_hdrs=False,
    )


def notify_stream_config(name: str, subjects: List[str]) -> StreamConfig:
    return StreamConfig(
        name=name,
        description=NOTIFY_STREAM_DESCRIPTION,
        subjects=list(subjects),
        num_replicas=1,
        retention=RetentionPolicy.INTEREST,
        max_age=DEFAULT_EXPIRY_TIME,
        storage=StorageType.FILE,
        allow_rollup_hdrs=False,
    )


async def _get_or_create_stream(js: JetStreamContext, config: StreamConfig, kind: str) -> StreamInfo:
    """Return the stream named in ``config``, creating it if it does not exist

    The config of an existing stream is never compared or updated.
    """
    name = config.name
    attrs = {"kind": kind, "name": name}

    with create_span(f"wadm_nats.ensure_{kind}", attrs):
        try:
            info = await js.stream_info(name)
            logger.info(f"Using existing JetStream stream: {name}")
            increment_counter("wadm_nats.resources.reused", 1, attrs)
            return info
        except NotFoundError:
            pass
        except NatsError as e:
            logger.error(f"Error occurred while checking JetStream stream {name}: {e!r}")
            raise ProvisioningError(f"Unable to look up stream {name}: {e!r}", resource=name) from e

        try:
            info = await js.add_stream(config=config)
        except NatsError as e:
            if isinstance(e, APIError) and e.err_code == STREAM_NAME_IN_USE:
                # Lost a creation race; whoever created it first wins
                logger.warning(f"JetStream stream {name} was created concurrently, using existing stream")
                increment_counter("wadm_nats.resources.reused", 1, attrs)
                return await js.stream_info(name)
            logger.error(f"Error occurred while creating JetStream stream {name}: {e!r}")
            raise ProvisioningError(f"Unable to create stream {name}: {e!r}", resource=name) from e

        logger.info(f"Created new JetStream stream: {name}")
        increment_counter("wadm_nats.resources.created", 1, attrs)
        return info


async def ensure_stream(js: JetStreamContext, name: str, subjects: List[str],
                        description: Optional[str] = None) -> StreamInfo:
    """Ensure a work queue stream exists

    Args:
        js: JetStream context
        name: Stream name
        subjects: Subjects captured by the stream
        description: Optional stream description

    Returns:
        StreamInfo: Info of the existing or newly created stream

    Raises:
        ProvisioningError: If the stream had to be created and creation failed
    """
    return await _get_or_create_stream(js, work_queue_stream_config(name, subjects, description), "stream")


async def ensure_status_stream(js: JetStreamContext, name: str, subjects: List[str]) -> StreamInfo:
    """Ensure the status stream exists, keeping the last 10 updates per subject"""
    return await _get_or_create_stream(js, status_stream_config(name, subjects), "status_stream")


async def ensure_notify_stream(js: JetStreamContext, name: str, subjects: List[str]) -> StreamInfo:
    """Ensure the interest based notify stream exists"""
    return await _get_or_create_stream(js, notify_stream_config(name, subjects), "notify_stream")
