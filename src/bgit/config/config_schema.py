"""Pydantic schema for the bgit configuration file."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RemoteSchema(BaseModel):
	"""Remote used for seeding and pushing."""

	model_config = ConfigDict(extra="forbid")

	name: str = "origin"
	fetch_before_track: bool = True


class CommitSchema(BaseModel):
	"""Defaults for the commit command."""

	model_config = ConfigDict(extra="forbid")

	message_template: str = "Update {path}"
	push: bool = False
	track_remote: bool = False

	@field_validator("message_template")
	@classmethod
	def _check_template(cls, value: str) -> str:
		try:
			value.format(path="x")
		except (KeyError, IndexError, ValueError) as e:
			msg = f"message_template may only use the {{path}} placeholder: {e}"
			raise ValueError(msg) from e
		return value


class IdentitySchema(BaseModel):
	"""Author and committer identity overriding git's user.name / user.email."""

	model_config = ConfigDict(extra="forbid")

	name: str | None = None
	email: str | None = None


class AppConfigSchema(BaseModel):
	"""Top level configuration."""

	model_config = ConfigDict(extra="forbid")

	remote: RemoteSchema = Field(default_factory=RemoteSchema)
	commit: CommitSchema = Field(default_factory=CommitSchema)
	identity: IdentitySchema = Field(default_factory=IdentitySchema)
