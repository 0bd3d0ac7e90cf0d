from __future__ import annotations

import xml.etree.ElementTree as ET

from sfdc_webhooks.domain.models import Artifact
from sfdc_webhooks.soap.requests import (
    create_remote_site_body,
    delete_apex_code_body,
    delete_remote_site_body,
    deploy_apex_code_body,
)

APEX_NS = "{http://soap.sforce.com/2006/08/apex}"
METADATA_NS = "{http://soap.sforce.com/2006/04/metadata}"


def test_deploy_body_keeps_artifact_order() -> None:
    classes = [Artifact("A", "public class A { String s = 'x' + '<y>'; }"), Artifact("B", "public class B {}")]
    triggers = [Artifact("T", "trigger T on Account (after insert) {}")]

    body = deploy_apex_code_body("token", classes, triggers)
    root = ET.fromstring(body)

    assert [el.text for el in root.iter(f"{APEX_NS}classes")] == [item.body for item in classes]
    assert [el.text for el in root.iter(f"{APEX_NS}triggers")] == [triggers[0].body]
    assert root.find(f".//{APEX_NS}sessionId").text == "token"
    assert root.find(f".//{APEX_NS}checkOnly").text == "false"


def test_delete_apex_code_body() -> None:
    body = delete_apex_code_body("token", ["A", "B"], ["T"])
    root = ET.fromstring(body)

    assert [el.text for el in root.iter(f"{APEX_NS}deleteClasses")] == ["A", "B"]
    assert [el.text for el in root.iter(f"{APEX_NS}deleteTriggers")] == ["T"]


def test_delete_apex_code_body_with_no_names_is_valid_xml() -> None:
    root = ET.fromstring(delete_apex_code_body("token", [], []))

    assert list(root.iter(f"{APEX_NS}deleteClasses")) == []


def test_create_remote_site_body() -> None:
    request = create_remote_site_body("tok&en", "https://example.com/hook?a=1&b=2")
    root = ET.fromstring(request.body)

    assert request.name.startswith("SW_Endpoint_")
    assert root.find(f".//{METADATA_NS}fullName").text == request.name
    assert root.find(f".//{METADATA_NS}url").text == "https://example.com/hook?a=1&b=2"
    assert root.find(f".//{METADATA_NS}isActive").text == "true"
    assert root.find(f".//{METADATA_NS}sessionId").text == "tok&en"


def test_remote_site_names_are_fresh() -> None:
    first = create_remote_site_body("token", "https://example.com")
    second = create_remote_site_body("token", "https://example.com")

    assert first.name != second.name


def test_delete_remote_site_body() -> None:
    root = ET.fromstring(delete_remote_site_body("token", "SW_Endpoint_1"))

    assert root.find(f".//{METADATA_NS}type").text == "RemoteSiteSetting"
    assert root.find(f".//{METADATA_NS}fullNames").text == "SW_Endpoint_1"
