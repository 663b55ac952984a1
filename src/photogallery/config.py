from pydantic import Field
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    session_secret: str = Field(..., min_length=1)  # HMAC key for session tokens, constant per deployment
    allowed_username: str  # The single identity allowed to upload and moderate
    site_url: str  # Public URL of the site, e.g. https://photos.example.com
    gallery_url: str = "/gallery"  # Where direct photo requests are redirected
    github_client_id: str = ""
    github_client_secret: str = ""
    ip_hash_salt: str = "default-salt-change-in-production"
    cors_origins: list[str] = []
    forwarded_allow_ips: str = "127.0.0.1"  # Proxies whose X-Forwarded-For is trusted by uvicorn
    allowed_referer_hosts: list[str] = []  # Hosts allowed to embed photos (besides site_url)
    photos_path: str  # Directory path for storing photo blobs
    secure_cookies: bool = True
    max_upload_size: int = 20 * 1024 * 1024
    max_upload_files: int = 10

    model_config = {
        "env_file": [".env"],
        "env_prefix": "PHOTOGALLERY_",
        "extra": "ignore",
    }
