from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GlobalConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    opensearch_host: str = "localhost"
    opensearch_port: int = 9200
    opensearch_use_ssl: bool = False
    opensearch_verify_certs: bool = True
    # "basic" uses username/password, "aws" signs requests with the boto3 session
    opensearch_auth: Literal["none", "basic", "aws"] = "none"
    opensearch_username: Optional[str] = None
    opensearch_password: Optional[str] = None
    aws_region: Optional[str] = None

    request_timeout: float = Field(5.0, gt=0)

    bulk_num_workers: int = Field(4, gt=0)
    bulk_flush_bytes: int = Field(5_000_000, gt=0)
    bulk_flush_interval: float = Field(30.0, gt=0)
    bulk_add_timeout: float = Field(5.0, gt=0)

    log_level: str = "INFO"


global_config = GlobalConfig()
