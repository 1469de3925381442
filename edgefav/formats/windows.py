"""Windows (Intune settings catalog) policy codec."""

import json
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from edgefav.core.errors import FormatError
from edgefav.core.export_model import build_export_model, load_export_model
from edgefav.core.models import FavoritesTree, count_nodes
from edgefav.formats.base import FormatCodec
from edgefav.utils.logger import setup_logger

logger = setup_logger()

ODATA_CONTEXT = "https://graph.microsoft.com/beta/$metadata#deviceManagement/configurationPolicies/$entity"
SETTING_DEFINITION_ID = "device_vendor_msft_policy_config_microsoft_edge~policy~microsoft_edge_managedfavorites"
DEFAULT_POLICY_NAME = "Edge_ManagedFavorites"


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """UTC timestamp with millisecond precision and a trailing Z."""
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


class WindowsCodec(FormatCodec):
    """Wraps the export array in a configuration policy JSON document."""

    name = "windows"
    file_suffix = ".json"

    def __init__(self, policy_name: str = DEFAULT_POLICY_NAME, description: str = ""):
        """
        Initialize Windows codec.

        Args:
            policy_name: Name given to the configuration policy
            description: Policy description
        """
        self.policy_name = policy_name
        self.description = description

    def build_policy(self, tree: FavoritesTree, moment: Optional[datetime] = None) -> Dict[str, Any]:
        """Build the policy object with a fresh id and timestamp."""
        now = iso_timestamp(moment)
        payload = json.dumps(build_export_model(tree), separators=(",", ":"), ensure_ascii=False)

        return {
            "@odata.context": ODATA_CONTEXT,
            "createdDateTime": now,
            "creationSource": None,
            "description": self.description,
            "lastModifiedDateTime": now,
            "name": self.policy_name,
            "platforms": "windows10",
            "priorityMetaData": None,
            "roleScopeTagIds": ["0"],
            "settingCount": 1,
            "technologies": "mdm",
            "id": str(uuid.uuid4()),
            "templateReference": {
                "templateId": "",
                "templateFamily": "none",
                "templateDisplayName": None,
                "templateDisplayVersion": None
            },
            "settings": [{
                "id": "0",
                "settingInstance": {
                    "@odata.type": "#microsoft.graph.deviceManagementConfigurationChoiceSettingInstance",
                    "settingDefinitionId": SETTING_DEFINITION_ID,
                    "settingInstanceTemplateReference": None,
                    "auditRuleInformation": None,
                    "choiceSettingValue": {
                        "settingValueTemplateReference": None,
                        "value": f"{SETTING_DEFINITION_ID}_1",
                        "children": [{
                            "@odata.type": "#microsoft.graph.deviceManagementConfigurationSimpleSettingInstance",
                            "settingDefinitionId": f"{SETTING_DEFINITION_ID}_managedfavorites",
                            "settingInstanceTemplateReference": None,
                            "auditRuleInformation": None,
                            "simpleSettingValue": {
                                "@odata.type": "#microsoft.graph.deviceManagementConfigurationStringSettingValue",
                                "settingValueTemplateReference": None,
                                "value": payload
                            }
                        }]
                    }
                }
            }]
        }

    def export_document(self, tree: FavoritesTree) -> str:
        """Render the policy as pretty-printed JSON."""
        document = json.dumps(self.build_policy(tree), indent=2, ensure_ascii=False)
        folders, links = count_nodes(tree.items)
        logger.info(f"Exported {folders} folders and {links} links as Windows policy")
        return document

    def _extract_payload(self, data: Any) -> Any:
        """Walk to settings[0]...simpleSettingValue.value, or None."""
        path = ["settings", 0, "settingInstance", "choiceSettingValue",
                "children", 0, "simpleSettingValue", "value"]
        current = data
        for step in path:
            if isinstance(step, int):
                if not isinstance(current, list) or len(current) <= step:
                    return None
            elif not isinstance(current, dict) or step not in current:
                return None
            current = current[step]
        return current

    def import_document(self, text: str) -> FavoritesTree:
        """
        Read the favourites out of a policy document.

        Only the nested string setting value is used; every other field
        is ignored.

        Raises:
            FormatError: If the document, or the payload inside it, is not valid
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Windows import failed: not JSON ({e})")
            raise FormatError(f"Invalid Intune JSON file: {e}")

        payload = self._extract_payload(data)
        if not isinstance(payload, str) or not payload:
            logger.error("Windows import failed: managed favourites value not found")
            raise FormatError("Invalid Intune JSON format: managed favourites value not found")

        try:
            entries = json.loads(payload)
        except json.JSONDecodeError as e:
            logger.error(f"Windows import failed: payload is not JSON ({e})")
            raise FormatError(f"Managed favourites value is not valid JSON: {e}")
        if not isinstance(entries, list):
            raise FormatError("Managed favourites value is not a JSON array")

        tree = load_export_model(entries)
        folders, links = count_nodes(tree.items)
        logger.info(f"Imported {folders} folders and {links} links from Windows policy")
        return tree
