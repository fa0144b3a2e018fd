import os
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

VERSION = "0.3.0"

loaded = load_dotenv()
if not loaded and Path(".env").exists():
	raise RuntimeError(".env file present but failed to load")


def get_str_env(name: str, default: str) -> str:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	return raw


def get_optional_str_env(name: str) -> Optional[str]:
	raw = os.getenv(name)
	if raw is None or raw.strip() == "":
		return None
	return raw


def get_int_env(name: str, default: int) -> int:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	try:
		return int(raw)
	except ValueError:
		logging.exception("Invalid %s: %r", name, raw)
		return default


def get_float_env(name: str, default: float) -> float:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	try:
		return float(raw)
	except ValueError:
		logging.exception("Invalid %s: %r", name, raw)
		return default


USER_AGENT = get_str_env("USER_AGENT", f"sitecheck/{VERSION}")
CRAWL_THROTTLE = get_int_env("CRAWL_THROTTLE", 5)
CRAWL_TIMEOUT_MS = get_int_env("CRAWL_TIMEOUT", 20000)
CRAWL_WAIT_INTERVAL = get_int_env("CRAWL_WAIT_INTERVAL", 0)
CRAWL_HOST = get_optional_str_env("CRAWL_HOST")
CRAWL_HTTP_USER = get_optional_str_env("CRAWL_HTTP_USER")
CRAWL_HTTP_PASSWORD = get_optional_str_env("CRAWL_HTTP_PASSWORD")
