"""
Application settings for the rule validation service.
Externalizes config so the same image runs locally and on any host.
"""
import os


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class AppSettings:
    """Application settings with environment variable support."""

    def __init__(self):
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT", "3000"))
        self.environment: str = os.getenv("ENVIRONMENT", "development")
        self.api_version: str = os.getenv("API_VERSION", "1.0.0")
        self.build_commit: str = os.getenv("BUILD_COMMIT", "unknown")

        self.enable_audit_logging: bool = _flag("ENABLE_AUDIT_LOGGING", "true")
        self.enable_redaction: bool = _flag("ENABLE_REDACTION", "true")

        # Shown on GET /; any of these may be unset
        self.author_name = os.getenv("AUTHOR_NAME")
        self.author_github = os.getenv("AUTHOR_GITHUB")
        self.author_email = os.getenv("AUTHOR_EMAIL")
        self.author_phone = os.getenv("AUTHOR_PHONE")

    def author_profile(self) -> dict:
        return {
            "name": self.author_name,
            "github": self.author_github,
            "email": self.author_email,
            "mobile": self.author_phone,
        }


settings = AppSettings()
