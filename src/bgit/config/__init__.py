"""Configuration for bgit."""

from bgit.config.config_loader import ConfigError, ConfigFileNotFoundError, ConfigLoader, ConfigParsingError
from bgit.config.config_schema import AppConfigSchema, CommitSchema, IdentitySchema, RemoteSchema

__all__ = [
	"AppConfigSchema",
	"CommitSchema",
	"ConfigError",
	"ConfigFileNotFoundError",
	"ConfigLoader",
	"ConfigParsingError",
	"IdentitySchema",
	"RemoteSchema",
]
