"""
Application configuration loaded from environment variables.
Uses pydantic-settings so every value can be overridden via a .env file.

Variables carry the ``VLANMGR_`` prefix, e.g. ``VLANMGR_STORE_BACKEND=memory``.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Store ────────────────────────────────────────────────────────────────
    # "dynamodb" for a real deployment, "memory" for local experiments
    store_backend: str = "dynamodb"
    # Logical table names inside the configuration store
    vlan_table: str = "VLAN"
    vlan_member_table: str = "VLAN_MEMBER"

    # ── AWS ──────────────────────────────────────────────────────────────────
    aws_region: str = "us-east-1"
    # Leave blank to use the default credential chain (IAM role, env vars, …)
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""

    # ── DynamoDB ─────────────────────────────────────────────────────────────
    dynamodb_table_name: str = "vlan_config"
    # Set to a local DynamoDB endpoint for development (e.g. http://localhost:8000)
    dynamodb_endpoint_url: str = ""

    # ── JWT ──────────────────────────────────────────────────────────────────
    auth_enabled: bool = True
    # Secret used to sign/verify JWT tokens.  Change this in production!
    jwt_secret_key: str = "changeme-super-secret-key"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60

    # Comma-separated "username:password" pairs.  Passwords may be bcrypt
    # hashes ("$2b$…").
    demo_users: str = "admin:secret,netops:netops"

    # ── Logging ──────────────────────────────────────────────────────────────
    log_level: str = "INFO"

    class Config:
        env_prefix = "VLANMGR_"
        env_file = ".env"
        env_file_encoding = "utf-8"

    def get_demo_users(self) -> dict[str, str]:
        """Return the demo user map {username: password}."""
        users: dict[str, str] = {}
        for pair in self.demo_users.split(","):
            pair = pair.strip()
            if ":" in pair:
                username, password = pair.split(":", 1)
                users[username.strip()] = password.strip()
        return users


settings = Settings()
