"""Application configuration loaded from config.yaml + environment variables."""

from __future__ import annotations

import yaml
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"
_ENV_FILE = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


def _load_yaml() -> dict:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


class YardConfig(BaseSettings):
    """Fixed yard coordinates stamped on every pick."""

    lat: float | None = None
    lng: float | None = None

    model_config = {**_ENV_FILE, "env_prefix": "YARD_"}

    @property
    def configured(self) -> bool:
        return self.lat is not None and self.lng is not None


class SmsConfig(BaseSettings):
    account_sid: str = ""
    auth_token: str = ""
    from_number: str = ""
    whatsapp_from: str = "whatsapp:+14155238886"  # Twilio sandbox
    channel: str = "sms"  # sms | whatsapp
    default_country_code: str = "+353"
    api_base: str = "https://api.twilio.com/2010-04-01"
    timeout_s: float = 10.0

    model_config = {**_ENV_FILE, "env_prefix": "TWILIO_"}


class EmailConfig(BaseSettings):
    from_address: str = "dispatch@irishmetals.ie"
    from_name: str = "Irish Metals"
    to_address: str = ""

    model_config = {**_ENV_FILE, "env_prefix": "EMAIL_"}


class CompanyConfig(BaseSettings):
    name: str = "Irish Metals Recycling"
    address_lines: list[str] = Field(default_factory=lambda: [
        "Unit 2, Duleek Business Park",
        "Co. Meath, A92 TK20",
    ])
    docket_suffix: str = "IMR"
    logo_path: str = ""

    model_config = {**_ENV_FILE, "env_prefix": "COMPANY_"}


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///data/skipjobs.db"
    app_url: str = "http://localhost:8000"
    log_level: str = "INFO"
    resend_api_key: str = ""
    yard: YardConfig = Field(default_factory=YardConfig)
    sms: SmsConfig = Field(default_factory=SmsConfig)
    email: EmailConfig = Field(default_factory=EmailConfig)
    company: CompanyConfig = Field(default_factory=CompanyConfig)

    model_config = {**_ENV_FILE}


def get_settings() -> Settings:
    """Build Settings by merging YAML sections with env values.

    Keys present in config.yaml win; anything the YAML leaves out falls back
    to the environment and then to the defaults above.
    """
    y = _load_yaml()
    top = {
        k: y[k]
        for k in ("database_url", "app_url", "log_level")
        if k in y
    }
    return Settings(
        yard=YardConfig(**y.get("yard", {})),
        sms=SmsConfig(**y.get("sms", {})),
        email=EmailConfig(**y.get("email", {})),
        company=CompanyConfig(**y.get("company", {})),
        **top,
    )
