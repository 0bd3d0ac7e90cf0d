"""Interpretation of SOAP batch responses."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from sfdc_webhooks.errors import MalformedResponseError

_DETAIL_TAGS = ("fullName", "name", "problem", "message", "statusCode", "faultcode", "faultstring")


def _local_name(tag: object) -> str:
    # "{http://soap.sforce.com/2006/04/metadata}success" -> "success"
    if not isinstance(tag, str):
        return ""
    return tag.split("}")[-1].split(":")[-1]


def _parse(body: str | bytes) -> ET.Element:
    if isinstance(body, str):
        body = body.strip().encode("utf-8")
    else:
        body = body.strip()
    if not body:
        raise MalformedResponseError("Empty SOAP response")
    try:
        return ET.fromstring(body)
    except ET.ParseError as exc:
        raise MalformedResponseError(f"Could not parse SOAP response: {exc}") from exc


def _is_true(element: ET.Element) -> bool:
    return (element.text or "").strip().lower() == "true"


def is_successful_response(body: str | bytes) -> bool:
    """Return True when no record in the response reports a failure.

    Every ``success`` element in the document must read ``true``; a response
    without any is a success too. SOAP faults count as failures.
    """
    root = _parse(body)
    for element in root.iter():
        name = _local_name(element.tag)
        if name == "Fault":
            return False
        if name == "success" and not _is_true(element):
            return False
    return True


def describe_failures(body: str | bytes) -> list[dict[str, str]]:
    """Collect the details of every failed record (or SOAP fault)."""
    root = _parse(body)
    failures: list[dict[str, str]] = []
    for element in root.iter():
        name = _local_name(element.tag)
        if name == "Fault":
            failures.append(_collect_details(element))
            continue
        for child in element:
            if _local_name(child.tag) == "success" and not _is_true(child):
                failures.append(_collect_details(element))
                break
    # Containers of failed records only carry a summary flag.
    return [failure for failure in failures if failure] or failures


def _has_success_child(element: ET.Element) -> bool:
    return any(_local_name(child.tag) == "success" for child in element)


def _collect_details(record: ET.Element) -> dict[str, str]:
    # Breadth first, so the record's own fields win over nested ones. Nested
    # records (with their own success flag) are reported separately.
    details: dict[str, str] = {}
    pending = list(record)
    while pending:
        element = pending.pop(0)
        if _has_success_child(element):
            continue
        name = _local_name(element.tag)
        if name in _DETAIL_TAGS and name not in details and element.text and element.text.strip():
            details[name] = element.text.strip()
        pending.extend(element)
    return details
