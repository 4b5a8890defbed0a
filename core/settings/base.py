# core/settings/base.py
ENV_MODEL_CONFIG = {
    "env_file": ".env",
    "env_file_encoding": "utf-8",
    "extra": "ignore",
    "populate_by_name": True,
}
