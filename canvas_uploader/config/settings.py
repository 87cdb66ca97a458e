from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    root_dir: Path = Path(".")
    server_host: str = "127.0.0.1"
    server_port: int = 3847
    server_base_url: str = "http://127.0.0.1:3847"

    canvas_base_url: str = ""
    canvas_page_url: str = ""
    canvas_course_id: str = ""
    canvas_csrf_token: str = ""
    canvas_session_cookie: str = ""

    upload_folder: str = "latex_images"
    editor: str = "canvas_page"
    editor_output_path: Path = Path("canvas_fragment.html")

    http_timeout_seconds: int = 30
