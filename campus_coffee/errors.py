"""
Error translation

Maps domain failures to the HTTP status and payload API clients see.
The mapping is a closed table over ErrorKind; every kind has an entry.
"""

from datetime import datetime
from enum import Enum
from http import HTTPStatus
from typing import Dict, Optional, Tuple

from loguru import logger

from .exceptions import (
    DuplicatePosNameException,
    OsmNodeMissingFieldsException,
    OsmNodeNotFoundException,
    OsmNodeParseException,
    OsmUpstreamUnavailableException,
    PosNotFoundException,
)
from .models import ErrorResponse

UNKNOWN_PATH = "unknown"
UNEXPECTED_MESSAGE = "An unexpected error occurred."
UPSTREAM_MESSAGE = "Error calling external OSM service"


class ErrorKind(str, Enum):
    """Failure kinds; the value is the errorCode clients receive"""
    POS_NOT_FOUND = "PosNotFoundException"
    OSM_NODE_NOT_FOUND = "OsmNodeNotFoundException"
    DUPLICATE_POS_NAME = "DuplicatePosNameException"
    INVALID_ARGUMENT = "IllegalArgumentException"
    OSM_NODE_MISSING_FIELDS = "OsmNodeMissingFieldsException"
    OSM_UPSTREAM_UNAVAILABLE = "OsmUpstreamUnavailableException"
    OSM_NODE_PARSE_FAILED = "OsmNodeParseException"
    UNEXPECTED = "InternalServerError"


STATUS_BY_KIND: Dict[ErrorKind, HTTPStatus] = {
    ErrorKind.POS_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.OSM_NODE_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.DUPLICATE_POS_NAME: HTTPStatus.CONFLICT,
    ErrorKind.INVALID_ARGUMENT: HTTPStatus.BAD_REQUEST,
    ErrorKind.OSM_NODE_MISSING_FIELDS: HTTPStatus.UNPROCESSABLE_ENTITY,
    ErrorKind.OSM_UPSTREAM_UNAVAILABLE: HTTPStatus.BAD_GATEWAY,
    ErrorKind.OSM_NODE_PARSE_FAILED: HTTPStatus.INTERNAL_SERVER_ERROR,
    ErrorKind.UNEXPECTED: HTTPStatus.INTERNAL_SERVER_ERROR,
}

_unmapped = set(ErrorKind) - set(STATUS_BY_KIND)
if _unmapped:
    raise RuntimeError(f"ErrorKind values without a status: {sorted(k.name for k in _unmapped)}")

# Checked in order; subclasses before their bases
_KIND_BY_EXCEPTION: Tuple[Tuple[type, ErrorKind], ...] = (
    (PosNotFoundException, ErrorKind.POS_NOT_FOUND),
    (OsmNodeNotFoundException, ErrorKind.OSM_NODE_NOT_FOUND),
    (DuplicatePosNameException, ErrorKind.DUPLICATE_POS_NAME),
    (OsmNodeMissingFieldsException, ErrorKind.OSM_NODE_MISSING_FIELDS),
    (OsmUpstreamUnavailableException, ErrorKind.OSM_UPSTREAM_UNAVAILABLE),
    (OsmNodeParseException, ErrorKind.OSM_NODE_PARSE_FAILED),
    (ValueError, ErrorKind.INVALID_ARGUMENT),
)


def classify(exception: BaseException) -> ErrorKind:
    """Failure kind for an exception; anything unknown is UNEXPECTED"""
    for exception_type, kind in _KIND_BY_EXCEPTION:
        if isinstance(exception, exception_type):
            return kind
    return ErrorKind.UNEXPECTED


def status_for(kind: ErrorKind) -> HTTPStatus:
    return STATUS_BY_KIND[kind]


def client_message(kind: ErrorKind, exception: BaseException) -> str:
    """Message safe to show to the client; internal causes are never echoed"""
    if kind is ErrorKind.UNEXPECTED:
        return UNEXPECTED_MESSAGE
    if kind is ErrorKind.OSM_UPSTREAM_UNAVAILABLE:
        return UPSTREAM_MESSAGE
    if kind is ErrorKind.OSM_NODE_PARSE_FAILED:
        return f"Unexpected response from OSM for node {exception.osm_node_id}"
    return str(exception)


def translate(
    exception: BaseException,
    path: Optional[str] = None,
    timestamp: Optional[datetime] = None,
) -> ErrorResponse:
    """
    Build the error payload for a failed request

    Args:
        exception: the failure raised while handling the request
        path: request URI, if known
        timestamp: defaults to now

    Returns:
        ErrorResponse with status code, reason phrase and errorCode
    """
    kind = classify(exception)
    status = status_for(kind)

    if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.opt(exception=exception).error(f"{kind.value}: {exception}")
    else:
        logger.warning(f"{kind.value}: {exception}")

    return ErrorResponse(
        error_code=kind.value,
        message=client_message(kind, exception),
        status_code=status.value,
        status_message=status.phrase,
        timestamp=timestamp or datetime.now(),
        path=path or UNKNOWN_PATH,
    )
