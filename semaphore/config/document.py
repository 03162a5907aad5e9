"""The ``config.json`` document shared by every Semaphore subsystem."""

from __future__ import annotations

import base64
import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from semaphore.config.database import DbConfig, omit_null_fields, select_db_config
from semaphore.security.cookie import generate_random_key

COOKIE_SECRET_BYTES = 32
_JSON_PREFIX = " "
_JSON_INDENT = "\t"


class LdapMappings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    dn: str = ""
    mail: str = ""
    uid: str = ""
    cn: str = ""

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        return omit_null_fields(data)


class ConfigType(BaseModel):
    """Mapping between the application configuration and ``config.json``.

    Only the JSON keys are accepted (``bolt``, not ``bolt_db``).  Missing keys
    and ``null`` values decode to empty values and unknown keys are ignored; a
    value of the wrong JSON type is a decode error.
    """

    model_config = ConfigDict(extra="ignore")

    mysql: DbConfig = Field(default_factory=DbConfig)
    bolt_db: DbConfig = Field(default_factory=DbConfig, alias="bolt")
    postgres: DbConfig = Field(default_factory=DbConfig, alias="pgsql")

    # Format ``:port_num``, e.g. ``:3000``; a missing colon is corrected.
    port: str = ""
    # IP put in front of the port, empty by default.
    interface: str = ""
    # Ephemeral project checkouts are stored here.
    tmp_path: str = ""

    # Base64 cookie hashing & encryption keys
    cookie_hash: str = ""
    cookie_encryption: str = ""

    email_sender: str = ""
    email_host: str = ""
    email_port: str = ""

    web_host: str = ""

    ldap_binddn: str = ""
    ldap_bindpassword: str = ""
    ldap_server: str = ""
    ldap_searchdn: str = ""
    ldap_searchfilter: str = ""
    ldap_mappings: LdapMappings = Field(default_factory=LdapMappings)

    telegram_chat: str = ""
    telegram_token: str = ""

    concurrency_mode: str = ""
    max_parallel_tasks: int = 0

    email_alert: bool = False
    telegram_alert: bool = False
    ldap_enable: bool = False
    ldap_needtls: bool = False

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        return omit_null_fields(data)

    def listen_address(self) -> str:
        return f"{self.interface}{self.port}"

    def get_db_config(self, *, allow_multiple: bool = False) -> DbConfig:
        return select_db_config(self, allow_multiple=allow_multiple)

    def generate_cookie_secrets(self) -> None:
        """Store freshly generated cookie keys; only used during setup."""

        hash_key = generate_random_key(COOKIE_SECRET_BYTES)
        encryption_key = generate_random_key(COOKIE_SECRET_BYTES)
        self.cookie_hash = base64.b64encode(hash_key).decode("ascii")
        self.cookie_encryption = base64.b64encode(encryption_key).decode("ascii")

    def to_json(self) -> str:
        """Render the document as indented JSON for display and setup tooling."""

        rendered = json.dumps(self.model_dump(by_alias=True), indent=_JSON_INDENT)
        return rendered.replace("\n", "\n" + _JSON_PREFIX)


__all__ = ["COOKIE_SECRET_BYTES", "ConfigType", "LdapMappings"]
