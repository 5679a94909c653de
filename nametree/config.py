"""Configuration management for the name tree service."""

import os


class Settings:
    """Application settings with environment variable support."""

    def __init__(self):
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT", "5000"))
        # Every worker process holds its own tree, so inserts are only shared with one worker
        self.proc_num: int = int(os.getenv("PROC_NUM", "1"))
        self.names_file: str = os.getenv("NAMES_FILE", "names.txt")
        self.root_component: str = os.getenv("ROOT_COMPONENT", "")
        self.json_indent: int = int(os.getenv("JSON_INDENT", "2"))
        self.cache_size: int = int(os.getenv("CACHE_SIZE", "10000"))
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def __repr__(self) -> str:
        return (
            f"Settings(host={self.host}, port={self.port}, "
            f"proc_num={self.proc_num}, names_file={self.names_file}, "
            f"root_component={self.root_component!r})"
        )


settings = Settings()
