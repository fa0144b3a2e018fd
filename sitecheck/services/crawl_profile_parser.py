import logging
import os
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

# YAML key -> command line option destination
_TOP_LEVEL_KEYS = {
    "throttle": "throttle",
    "timeout_ms": "timeout",
    "iterations": "iterations",
    "forever": "forever",
    "wait_interval": "wait_interval",
    "override_host": "override_host",
    "user": "user",
    "pass": "password",
    "pre_cmd": "pre_cmd",
    "post_cmd": "post_cmd",
}
_CRAWL_KEYS = {
    "hyperlinks": "crawl_hyperlinks",
    "images": "crawl_images",
    "external": "crawl_external",
}
_ERROR_KEYS = {
    "non_200": "non_200_error",
    "response_time": "response_time_error",
    "response_time_max_ms": "response_time_max",
}


class CrawlProfileParser:
    """Parse a YAML crawl profile into command line defaults.

    Responsibility: schema/validation of profile files. Values given on the
    command line still take precedence over the returned defaults.
    """

    def load_yaml_dict(self, path: str) -> Optional[dict]:
        """Return the parsed YAML mapping at `path`, or None if missing/invalid."""
        if not os.path.isfile(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError):
            logger.exception("Could not read profile %s", path)
            return None
        return data if isinstance(data, dict) else None

    def parse(self, data: dict) -> Dict[str, Any]:
        defaults: Dict[str, Any] = {}
        for key, value in data.items():
            if key in _TOP_LEVEL_KEYS:
                defaults[_TOP_LEVEL_KEYS[key]] = value
            elif key == "crawl":
                defaults.update(self._section(value, _CRAWL_KEYS, key))
            elif key == "errors":
                defaults.update(self._section(value, _ERROR_KEYS, key))
            else:
                logger.warning("Ignoring unknown profile key %r", key)
        return defaults

    def load(self, path: str) -> Optional[Dict[str, Any]]:
        data = self.load_yaml_dict(path)
        if data is None:
            return None
        return self.parse(data)

    def _section(self, value: Any, keys: Dict[str, str], name: str) -> Dict[str, Any]:
        if not isinstance(value, dict):
            logger.warning("Ignoring profile section %r: expected a mapping", name)
            return {}
        parsed = {}
        for key, item in value.items():
            if key not in keys:
                logger.warning("Ignoring unknown profile key %r in %r", key, name)
                continue
            parsed[keys[key]] = item
        return parsed
