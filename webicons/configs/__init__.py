"""Configuration for webicons"""

from pathlib import Path

from dynaconf import Dynaconf, Validator

# Validators for webicons settings.
_validators = [
    Validator("logging.format", is_in=["mozlog", "pretty"]),
    Validator("logging.level", is_in=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    Validator("logging.can_propagate", is_type_of=bool),
    Validator("metrics.dev_logger", is_type_of=bool),
    Validator("metrics.host", is_type_of=str),
    Validator("metrics.port", gte=0, is_type_of=int),
    Validator("metrics.namespace", is_type_of=str, must_exist=True),
    Validator("icons.device_pixel_ratio", gt=0, must_exist=True),
    # The icon fetch is a single request with a hard timeout, keep it bounded.
    Validator("icons.fetch.timeout_sec", is_type_of=float, gt=0, lte=60.0, must_exist=True),
    Validator("icons.fetch.connect_timeout_sec", is_type_of=float, gt=0),
    Validator("icons.fetch.max_connections", is_type_of=int, gte=1),
    Validator("icons.fetch.user_agent", is_type_of=str),
    Validator("icons.cache.backend", is_in=["memory", "redis", "none"], must_exist=True),
    Validator("icons.cache.store_name", is_type_of=str, must_exist=True),
    # The Redis server URL is required when the icon store is backed by Redis.
    Validator(
        "redis.server",
        is_type_of=str,
        must_exist=True,
        when=Validator("icons.cache.backend", must_exist=True, eq="redis"),
    ),
    Validator("redis.max_connections", is_type_of=int, gte=1),
    Validator("redis.socket_connect_timeout_sec", is_type_of=int, gte=0),
    Validator("redis.socket_timeout_sec", is_type_of=int, gte=0),
]

# `root_path` = The directory holding the settings files below.
# `envvar_prefix` = Export envvars with `export WEBICONS_FOO=bar`.
# `settings_files` = Load these files in the order.
# `environments` = Enable layered environments such as `development`, `production`, `testing` etc.
# `merge_enabled` = Deep-merge nested tables of an environment into the defaults.
# `env_switcher` = Switch environments by `export WEBICONS_ENV=production`. Default: `development`.
# `validators` = Define validators for webicons settings.

settings = Dynaconf(
    root_path=str(Path(__file__).parent),
    envvar_prefix="WEBICONS",
    settings_files=[
        "default.toml",
        "development.toml",
        "production.toml",
        "testing.toml",
    ],
    environments=True,
    merge_enabled=True,
    env_switcher="WEBICONS_ENV",
    validators=_validators,
)
