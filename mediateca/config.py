import os
from pathlib import Path
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


BASE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = BASE_DIR.parent


def _bool_env(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _engine_options(uri: str) -> dict[str, object]:
    options: dict[str, object] = {"pool_pre_ping": True}
    if uri.startswith("sqlite:"):
        options["connect_args"] = {"check_same_thread": False}
    return options


def normalize_db_url(raw: str | None) -> str:
    """
    Normaliza la DATABASE_URL para evitar errores:
    - Convierte postgres:// -> postgresql+psycopg://
    - Si es SQLite, elimina cualquier query (?sslmode=...)
    - Si es Postgres remoto, asegura sslmode=require (si no está presente)
    """

    if not raw:
        return f"sqlite:///{PROJECT_ROOT / 'instance' / 'mediateca.db'}"

    if raw.startswith("postgres://"):
        raw = raw.replace("postgres://", "postgresql+psycopg://", 1)
    elif raw.startswith("postgresql://"):
        raw = raw.replace("postgresql://", "postgresql+psycopg://", 1)

    parts = urlsplit(raw)
    scheme = parts.scheme

    if scheme.startswith("sqlite"):
        return raw.split("?", 1)[0]

    if scheme.startswith("postgresql") and parts.hostname not in {None, "localhost", "127.0.0.1"}:
        query_params = dict(parse_qsl(parts.query))
        query_params.setdefault("sslmode", "require")
        return urlunsplit(
            (scheme, parts.netloc, parts.path, urlencode(query_params), parts.fragment)
        )

    return raw


class Config:
    APP_NAME = "mediateca"
    TESTING = False
    DEBUG = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
        self.DATABASE_URL = normalize_db_url(os.getenv("DATABASE_URL"))
        self.SQLALCHEMY_DATABASE_URI = self.DATABASE_URL
        self.SQLALCHEMY_TRACK_MODIFICATIONS = False
        self.SQLALCHEMY_ENGINE_OPTIONS = _engine_options(self.SQLALCHEMY_DATABASE_URI)
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
        self.DATA_DIR = os.getenv("DATA_DIR", str(PROJECT_ROOT / "data"))
        self.UPLOAD_DIR = os.getenv("UPLOAD_DIR") or str(Path(self.DATA_DIR) / "uploads")
        self.MAX_CONTENT_LENGTH = _int_env("UPLOAD_MAX_MB", 50) * 1024 * 1024
        # Intentos de creación de la carpeta por defecto ante choques de nombre
        self.UPLOAD_FOLDER_CREATE_ATTEMPTS = max(_int_env("UPLOAD_FOLDER_CREATE_ATTEMPTS", 3), 1)
        self.MIGRATIONS_DIR = str(PROJECT_ROOT / "migrations")
        self.APP_VERSION = os.getenv("APP_VERSION", "dev")
        self.DEBUG = _bool_env("DEBUG", self.DEBUG)


class DevelopmentConfig(Config):
    DEBUG = True

    def __init__(self) -> None:
        super().__init__()
        self.DEBUG = True


class ProductionConfig(Config):
    DEBUG = False

    def __init__(self) -> None:
        super().__init__()
        self.DEBUG = False


class TestingConfig(Config):
    TESTING = True
    DEBUG = False

    def __init__(self) -> None:
        super().__init__()
        self.DATABASE_URL = "sqlite:///:memory:"
        self.SQLALCHEMY_DATABASE_URI = self.DATABASE_URL
        self.SQLALCHEMY_ENGINE_OPTIONS = _engine_options(self.SQLALCHEMY_DATABASE_URI)


def load_config(env: str | None = None) -> Config:
    env_name = (env or os.getenv("APP_ENV") or os.getenv("FLASK_ENV") or "production").lower()

    if env is None and env_name in {"prod", "production"}:
        db_url_env = os.getenv("DATABASE_URL", "")
        running_ci = os.getenv("CI", "").lower() in {"true", "1"}
        if not running_ci and (not db_url_env or db_url_env.startswith("sqlite:")):
            env_name = "development"
    if env_name in {"test", "testing"}:
        cfg: Config = TestingConfig()
    elif env_name in {"prod", "production"}:
        cfg = ProductionConfig()
    elif env_name in {"dev", "development"}:
        cfg = DevelopmentConfig()
    else:
        cfg = Config()

    if (
        env_name in {"prod", "production"}
        and cfg.SQLALCHEMY_DATABASE_URI.startswith("sqlite:")
        and os.getenv("CI", "").lower() not in {"true", "1"}
    ):
        raise RuntimeError("DATABASE_URL no definido en producción (detectado sqlite)")

    return cfg
