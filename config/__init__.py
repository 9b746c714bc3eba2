import os

# APP_ENV value -> settings module. Unknown or empty values fall back to development.
SETTINGS_MODULES = {
    "development": "config.development",
    "dev": "config.development",
    "production": "config.production",
    "prod": "config.production",
    "testing": "config.testing",
    "test": "config.testing",
}


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "").strip().lower()
    return SETTINGS_MODULES.get(env, SETTINGS_MODULES["development"])
