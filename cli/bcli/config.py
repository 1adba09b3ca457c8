import difflib
import logging
import os
from typing import Any, Dict, List

import yaml
from jsonschema import Draft202012Validator

logger = logging.getLogger(__name__)

CONFIG_PATH = ".bian2context.yml"

SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "compress": {"type": "boolean"},
        "format": {"type": "string", "enum": ["txt", "json"]},
        "filter": {"type": "string"},
        "workers": {"type": "integer", "minimum": 1, "maximum": 32},
        "replacements": {
            "type": "object",
            "additionalProperties": {"type": "string"},
        },
    },
    "additionalProperties": False,
}


def default_config() -> Dict[str, Any]:
    return {
        "compress": False,
        "format": "txt",
        "filter": None,
        "workers": 1,
        "replacements": {},
    }


def load_config(path: str = CONFIG_PATH) -> Dict[str, Any]:
    cfg = default_config()
    if not os.path.exists(path):
        return cfg
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        # fall back to defaults if YAML is malformed
        logger.warning("Ignoring malformed config %s: %s", path, e)
        return cfg
    if not isinstance(data, dict):
        return cfg
    errors = validate_config_dict(data)
    if errors:
        logger.warning("Ignoring invalid config %s: %s", path, "; ".join(errors))
        return cfg
    cfg.update({k: v for k, v in data.items() if k in cfg})
    return cfg


def validate_config_dict(data: Dict[str, Any]) -> List[str]:
    validator = Draft202012Validator(SCHEMA)
    errors = []
    valid_keys = set(SCHEMA["properties"].keys())
    for err in validator.iter_errors(data):
        msg = err.message
        if err.validator == "additionalProperties" and not err.path:
            bad_key = sorted(err.instance.keys() - valid_keys)
            if bad_key:
                suggestion = difflib.get_close_matches(bad_key[0], list(valid_keys), n=1)
                if suggestion:
                    msg += f" (did you mean '{suggestion[0]}'?)"
        errors.append(msg)
    return errors


def validate_config_file(path: str = CONFIG_PATH) -> List[str]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            return [f"Malformed YAML: {e}"]
    if not isinstance(data, dict):
        return ["Config must be a mapping"]
    return validate_config_dict(data)
