# =============================================================================
# Configuration Models Module
# =============================================================================
# Provides the Pydantic Settings model for the provisioning connection:
# - MongoSettings: MongoDB administrative connection configuration
# =============================================================================

from typing import Optional
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

__all__ = ["MongoSettings"]


# =============================================================================
# MongoDB Settings (Administrative Connection)
# =============================================================================

class MongoSettings(BaseSettings):
    """
    Configuration for the MongoDB connection used to provision the schema.

    Maps environment variables:
    - MONGO_URI → uri (full connection string, overrides host/port/credentials)
    - MONGO_HOST → host
    - MONGO_PORT → port
    - MONGO_INITDB_ROOT_USERNAME → username
    - MONGO_INITDB_ROOT_PASSWORD → password
    - MONGO_DATABASE → database
    - MONGO_AUTH_SOURCE → auth_source
    - MONGO_SERVER_SELECTION_TIMEOUT_MS → server_selection_timeout_ms

    Attributes:
        uri: Complete MongoDB URI; when set, host/port/credentials are ignored
        host: MongoDB host (default: "mongodb")
        port: MongoDB port (default: 27017)
        username: MongoDB username (optional, unauthenticated when omitted)
        password: MongoDB password (optional)
        database: Database to provision (default: "myapp")
        auth_source: Authentication source (default: "admin")
        server_selection_timeout_ms: How long to wait for a reachable server
    """

    uri: Optional[str] = Field(None, validation_alias="MONGO_URI", description="Full MongoDB connection URI")
    host: str = Field("mongodb", validation_alias="MONGO_HOST", description="MongoDB host")
    port: int = Field(27017, validation_alias="MONGO_PORT", description="MongoDB port")
    username: Optional[str] = Field(None, validation_alias="MONGO_INITDB_ROOT_USERNAME", description="MongoDB username (maps from MONGO_INITDB_ROOT_USERNAME)")
    password: Optional[str] = Field(None, validation_alias="MONGO_INITDB_ROOT_PASSWORD", description="MongoDB password (maps from MONGO_INITDB_ROOT_PASSWORD)")
    database: str = Field("myapp", validation_alias="MONGO_DATABASE", description="Database name")
    auth_source: str = Field("admin", validation_alias="MONGO_AUTH_SOURCE", description="Authentication source")
    server_selection_timeout_ms: int = Field(
        10000,
        gt=0,
        validation_alias="MONGO_SERVER_SELECTION_TIMEOUT_MS",
        description="Server selection timeout in milliseconds",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Ignore unrelated env vars from shared .env files
    )

    @property
    def connection_string(self) -> str:
        """
        Build MongoDB connection URI.

        Format: mongodb://[username:password@][host]:[port]/[database][?authSource=[auth_source]]

        Credentials are percent-encoded. authSource is only appended when
        credentials are present.

        Returns:
            MongoDB connection URI string
        """
        if self.uri:
            return self.uri

        if self.username:
            credentials = quote_plus(self.username)
            if self.password is not None:
                credentials += f":{quote_plus(self.password)}"
            return (
                f"mongodb://{credentials}@"
                f"{self.host}:{self.port}/{self.database}?authSource={self.auth_source}"
            )

        return f"mongodb://{self.host}:{self.port}/{self.database}"
