"""設定管理用のデータクラス"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import json
import os

from ..errors import ConfigurationError


DEFAULT_ACL = "private"


@dataclass
class LoggingConfig:
    """ロギング設定"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass
class S3Config:
    """ミラー元とミラー先の設定"""
    # 必須フィールド
    source: str
    bucket: str

    # オプションフィールド
    prefix: str = ""
    region: Optional[str] = None  # 未設定ならバケットから解決
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    profile: Optional[str] = None
    acl: Optional[str] = DEFAULT_ACL
    cache_control: Optional[str] = None
    ignore: List[str] = field(default_factory=list)

    def __post_init__(self):
        """S3設定のバリデーション"""
        for name in ("source", "bucket", "prefix"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ConfigurationError(f"s3.{name} must be a string")

        if not self.source or not self.source.strip():
            raise ConfigurationError("s3.source cannot be empty")

        if not self.bucket or not self.bucket.strip():
            raise ConfigurationError("s3.bucket cannot be empty")

        # アクセスキーとシークレットキーは両方指定する
        if bool(self.access_key) != bool(self.secret_key):
            raise ConfigurationError(
                "s3.access_key and s3.secret_key must be set together"
            )

        if not self.acl:
            self.acl = DEFAULT_ACL

        self.prefix = self.prefix or ""

        if not isinstance(self.ignore, list) or not all(isinstance(p, str) for p in self.ignore):
            raise ConfigurationError("s3.ignore must be a list of glob patterns")


@dataclass
class MirrorOptions:
    """実行オプション"""
    parallel: int = 4
    dry_run: bool = False
    max_attempts: int = 30
    retry_delay_seconds: float = 1.0

    def __post_init__(self):
        if self.parallel < 1:
            raise ConfigurationError(
                f"Invalid parallel: {self.parallel}. Must be at least 1"
            )

        if self.max_attempts < 1:
            raise ConfigurationError(
                f"Invalid max_attempts: {self.max_attempts}. Must be at least 1"
            )

        if self.retry_delay_seconds < 0:
            raise ConfigurationError(
                f"Invalid retry_delay_seconds: {self.retry_delay_seconds}. Must not be negative"
            )


@dataclass
class Config:
    """メイン設定クラス"""
    logging: LoggingConfig
    s3: S3Config
    options: MirrorOptions

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """設定ファイルから読み込み"""
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file {config_path} not found.")

        try:
            with open(config_path, "r", encoding="utf-8") as file:
                data = json.load(file)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Error decoding JSON from {config_path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Error reading {config_path}: {e}") from e

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """辞書から設定を作成"""
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration root must be a JSON object")

        if "s3" not in data:
            raise ConfigurationError("Missing required section: s3")

        try:
            # 各セクションをパース
            logging_config = LoggingConfig(**data.get("logging", {}))
            s3_config = S3Config(**data["s3"])
            options = MirrorOptions(**data.get("options", {}))
        except TypeError as e:
            # 未知のキーや必須キーの欠落
            raise ConfigurationError(f"Error loading configuration: {e}") from e

        return cls(
            logging=logging_config,
            s3=s3_config,
            options=options,
        )
