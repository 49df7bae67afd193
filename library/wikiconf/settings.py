"""
Django settings for wikiconf.

There is no database: the project only fetches siteinfo over HTTP and
prints or serves what it derives from it. Every value below can be
overridden from the environment.
"""

import os
from pathlib import Path

from wikiconf import __version__

BASE_DIR = Path(__file__).resolve().parent.parent

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
# off/trace/warn as accepted by the env_logger-style convention
LOG_ALIASES = {"OFF": "CRITICAL", "TRACE": "DEBUG", "WARN": "WARNING"}


def env_log_level(value, default="INFO"):
    """Map a log level name from the environment; unknown names give `default`."""
    level = (value or "").strip().upper()
    level = LOG_ALIASES.get(level, level)
    return level if level in LOG_LEVELS else default


def env_float(value, default):
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


SECRET_KEY = os.environ.get("WIKICONF_SECRET_KEY", "wikiconf-insecure-development-key")
DEBUG = os.environ.get("WIKICONF_DEBUG", "") == "1"
ALLOWED_HOSTS = os.environ.get("WIKICONF_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

INSTALLED_APPS = [
    "siteinfo",
]

MIDDLEWARE = [
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "wikiconf.urls"

DATABASES = {}

USE_TZ = True


# ===============================
# siteinfo endpoint
# ===============================

SITEINFO_API_PATH = os.environ.get("SITEINFO_API_PATH", "/w/api.php")
SITEINFO_TIMEOUT = env_float(os.environ.get("SITEINFO_TIMEOUT"), 30.0)

# Wikimedia asks for a way to contact the operator in the User-Agent
SITEINFO_CONTACT = os.environ.get("SITEINFO_CONTACT", "")
SITEINFO_USER_AGENT = os.environ.get(
    "SITEINFO_USER_AGENT",
    f"wikiconf/{__version__}" + (f" ({SITEINFO_CONTACT})" if SITEINFO_CONTACT else ""),
)


# ===============================
# logging (stderr, so generated code on stdout stays clean)
# ===============================

LOG_VAR = "WIKICONF_LOG"
LOG_LEVEL = env_log_level(os.environ.get(LOG_VAR))

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "padded": {
            "format": "%(asctime)s %(levelname)7s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "stderr": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "formatter": "padded",
        },
    },
    "loggers": {
        "siteinfo": {
            "handlers": ["stderr"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}
