import configparser
from dataclasses import dataclass, field
from pathlib import Path

PROTOCOLS = ("ftp", "sftp")
DEFAULT_PORTS = {"ftp": 21, "sftp": 22}


@dataclass(frozen=True)
class UserCredentials:
    username: str
    password: str = field(default="", repr=False)


@dataclass
class ServerConfig:
    host: str
    port: int = 21
    username: str | None = None
    password: str | None = field(default=None, repr=False)

    @property
    def credentials(self) -> UserCredentials:
        return UserCredentials(self.username or "anonymous", self.password or "")


@dataclass
class ConnectionConfig:
    timeout_seconds: int = 30
    keepalive_seconds: int = 300  # FTP control channel
    passive_mode: bool = True
    encoding: str = "utf-8"
    verify_host_keys: bool = True  # SFTP only


@dataclass
class LogConfig:
    level: str = "INFO"
    file: str = "ftp-unified.log"
    console: bool = True


@dataclass
class AppConfig:
    server: ServerConfig
    connection: ConnectionConfig
    logging: LogConfig
    protocol: str = "ftp"  # "ftp" or "sftp"


def _parse_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


def _parse_int(section: configparser.SectionProxy, key: str) -> int:
    try:
        return int(section.get(key))
    except ValueError:
        raise ValueError(
            f"Invalid {key} value in config: '{section.get(key)}' - must be an integer"
        )


def load_config(config_path: str | None = None, **cli_args) -> AppConfig:
    """
    Load configuration from an INI file and/or CLI arguments.
    CLI arguments take precedence over config file.

    Args:
        config_path: Path to the INI configuration file.
        **cli_args: Key-value pairs from command line arguments.

    Returns:
        AppConfig: The populated configuration object.

    Raises:
        FileNotFoundError: If config_path is provided but does not exist.
        ValueError: If host is missing, a number is malformed or the
            protocol is unknown.
    """
    server_config = {
        "host": None,
        "port": None,
        "username": None,
        "password": None,
    }
    connection_config = {
        "timeout_seconds": 30,
        "keepalive_seconds": 300,
        "passive_mode": True,
        "encoding": "utf-8",
        "verify_host_keys": True,
    }
    log_config = {
        "level": "INFO",
        "file": "ftp-unified.log",
        "console": True,
    }
    protocol = "ftp"

    if config_path is not None:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        parser = configparser.ConfigParser()
        parser.read(config_file, encoding="utf-8")

        if parser.has_section("general") and parser["general"].get("protocol"):
            protocol = parser["general"]["protocol"].lower()

        # Load [server] section
        if parser.has_section("server"):
            server_section = parser["server"]
            if server_section.get("host"):
                server_config["host"] = server_section.get("host")
            if server_section.get("port"):
                server_config["port"] = _parse_int(server_section, "port")
            if server_section.get("username"):
                server_config["username"] = server_section.get("username")
            if server_section.get("password"):
                server_config["password"] = server_section.get("password")

        # Load [connection] section
        if parser.has_section("connection"):
            conn_section = parser["connection"]
            for key in ("timeout_seconds", "keepalive_seconds"):
                if conn_section.get(key):
                    connection_config[key] = _parse_int(conn_section, key)
            for key in ("passive_mode", "verify_host_keys"):
                if conn_section.get(key):
                    connection_config[key] = _parse_bool(conn_section.get(key))
            if conn_section.get("encoding"):
                connection_config["encoding"] = conn_section.get("encoding")

        # Load [logging] section
        if parser.has_section("logging"):
            log_section = parser["logging"]
            if log_section.get("level"):
                log_config["level"] = log_section.get("level")
            if log_section.get("file") is not None:
                log_config["file"] = log_section.get("file")
            if log_section.get("console"):
                log_config["console"] = _parse_bool(log_section.get("console"))

    # Override with CLI arguments (cli_args take precedence)
    if cli_args.get("protocol") is not None:
        protocol = cli_args["protocol"].lower()
    if cli_args.get("host") is not None:
        server_config["host"] = cli_args["host"]
    if cli_args.get("port") is not None:
        server_config["port"] = int(cli_args["port"])
    if cli_args.get("username") is not None:
        server_config["username"] = cli_args["username"] or None
    if cli_args.get("password") is not None:
        server_config["password"] = cli_args["password"] or None
    if cli_args.get("debug"):
        log_config["level"] = "DEBUG"
        log_config["console"] = True

    if protocol not in PROTOCOLS:
        raise ValueError(f"Unknown protocol: {protocol}. Must be one of: {', '.join(PROTOCOLS)}")
    if not server_config["host"]:
        raise ValueError("Missing required configuration fields: host")

    return AppConfig(
        server=ServerConfig(
            host=server_config["host"],
            port=server_config["port"] or DEFAULT_PORTS[protocol],
            username=server_config["username"],
            password=server_config["password"],
        ),
        connection=ConnectionConfig(**connection_config),
        logging=LogConfig(**log_config),
        protocol=protocol,
    )
