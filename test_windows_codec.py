"""Tests for the Windows (Intune) policy codec."""

import json
import re
import uuid
from datetime import datetime, timezone

import pytest

from edgefav.core.errors import FormatError
from edgefav.core.export_model import build_export_model
from edgefav.core.models import FavoritesTree, Folder, Link
from edgefav.formats.windows import DEFAULT_POLICY_NAME, SETTING_DEFINITION_ID, WindowsCodec, iso_timestamp


def sample_tree():
    return FavoritesTree("Contoso", [
        Folder("Work", [
            Link("Mail", "https://mail.example/?a=1&b=\"2\""),
            Folder("Empty"),
        ]),
        Link("Docs", "https://docs.example"),
    ])


def payload_of(document):
    data = json.loads(document)
    setting = data["settings"][0]["settingInstance"]
    return setting["choiceSettingValue"]["children"][0]["simpleSettingValue"]["value"]


def test_iso_timestamp_has_milliseconds():
    moment = datetime(2024, 3, 5, 7, 8, 9, 123456, tzinfo=timezone.utc)
    assert iso_timestamp(moment) == "2024-03-05T07:08:09.123Z"
    assert re.fullmatch(r"\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d\.\d{3}Z", iso_timestamp())


def test_policy_envelope():
    codec = WindowsCodec()
    data = json.loads(codec.export_document(sample_tree()))
    assert data["name"] == DEFAULT_POLICY_NAME
    assert data["platforms"] == "windows10"
    assert data["technologies"] == "mdm"
    assert data["settingCount"] == 1
    assert data["roleScopeTagIds"] == ["0"]
    assert data["createdDateTime"] == data["lastModifiedDateTime"]
    uuid.UUID(data["id"])

    instance = data["settings"][0]["settingInstance"]
    assert instance["settingDefinitionId"] == SETTING_DEFINITION_ID
    assert instance["choiceSettingValue"]["value"] == f"{SETTING_DEFINITION_ID}_1"
    child = instance["choiceSettingValue"]["children"][0]
    assert child["settingDefinitionId"] == f"{SETTING_DEFINITION_ID}_managedfavorites"


def test_payload_is_double_encoded_export_model():
    tree = sample_tree()
    payload = payload_of(WindowsCodec().export_document(tree))
    assert isinstance(payload, str)
    assert json.loads(payload) == build_export_model(tree)


def test_each_export_gets_a_new_id():
    codec = WindowsCodec()
    first = json.loads(codec.export_document(sample_tree()))
    second = json.loads(codec.export_document(sample_tree()))
    assert first["id"] != second["id"]


def test_policy_name_is_configurable():
    data = json.loads(WindowsCodec(policy_name="Corp favourites", description="d").export_document(sample_tree()))
    assert data["name"] == "Corp favourites"
    assert data["description"] == "d"


def test_round_trip_is_stable():
    codec = WindowsCodec()
    model = build_export_model(sample_tree())
    imported = codec.import_document(codec.export_document(sample_tree()))
    assert build_export_model(imported) == model
    assert imported.root_label == "Contoso"
    # The standalone link comes back inside the synthesized folder
    assert imported.items[-1] == Folder("Links", [Link("Docs", "https://docs.example")])


def test_import_ignores_envelope_fields():
    payload = json.dumps([{"toplevel_name": "T"}, {"name": "F", "children": []}])
    document = json.dumps({
        "settings": [{"settingInstance": {"choiceSettingValue": {
            "children": [{"simpleSettingValue": {"value": payload}}]
        }}}]
    })
    tree = WindowsCodec().import_document(document)
    assert tree == FavoritesTree("T", [Folder("F", [])])


@pytest.mark.parametrize("document", [
    "not json",
    "{}",
    "[]",
    json.dumps({"settings": []}),
    json.dumps({"settings": [{"settingInstance": {"choiceSettingValue": {"children": [{}]}}}]}),
    json.dumps({"settings": [{"settingInstance": {"choiceSettingValue": {
        "children": [{"simpleSettingValue": {"value": ""}}]}}}]}),
    json.dumps({"settings": [{"settingInstance": {"choiceSettingValue": {
        "children": [{"simpleSettingValue": {"value": "{broken"}}]}}}]}),
    json.dumps({"settings": [{"settingInstance": {"choiceSettingValue": {
        "children": [{"simpleSettingValue": {"value": "{\"a\": 1}"}}]}}}]}),
])
def test_malformed_documents_raise_format_error(document):
    with pytest.raises(FormatError):
        WindowsCodec().import_document(document)
