"""S3クライアント管理"""
import boto3
from typing import Optional
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError
from ..errors import ConfigurationError
from ..models.config import S3Config
from ..utils.logger import LoggerManager


# バケットのリージョン解決に使う初期リージョン
REGION_HINT = "us-west-2"


class S3ClientManager:
    """S3クライアントの作成と管理"""

    def __init__(self, s3_config: S3Config):
        self.s3_config = s3_config
        self.logger = LoggerManager.get_logger()
        self._client = None

    def get_client(self):
        """S3クライアントを取得（必要に応じて作成）"""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_session(self) -> boto3.Session:
        """認証情報からセッションを作成"""
        if self.s3_config.access_key:
            # 設定ファイルの静的な認証情報
            return boto3.Session(
                aws_access_key_id=self.s3_config.access_key,
                aws_secret_access_key=self.s3_config.secret_key,
            )

        if self.s3_config.profile:
            return boto3.Session(profile_name=self.s3_config.profile)

        return boto3.Session()

    def _create_client(self):
        """S3クライアントを作成"""
        try:
            session = self._create_session()

            region = self.s3_config.region
            if not region:
                region = self._resolve_bucket_region(session)
            if not region:
                raise ConfigurationError("unknown region")

            s3_client = session.client("s3", region_name=region)
            self.logger.info(f"S3 client created for bucket {self.s3_config.bucket} in {region}.")
            return s3_client

        except NoCredentialsError as e:
            self.logger.error("AWS credentials not available.")
            raise ConfigurationError(f"AWS credentials not available: {e}") from e
        except BotoCoreError as e:
            self.logger.error(f"Error creating S3 client: {e}")
            raise ConfigurationError(f"Error creating S3 client: {e}") from e

    def _resolve_bucket_region(self, session: boto3.Session) -> Optional[str]:
        """バケットのリージョンを問い合わせる"""
        client = session.client("s3", region_name=REGION_HINT)

        try:
            response = client.head_bucket(Bucket=self.s3_config.bucket)
        except ClientError as e:
            # リダイレクト応答にもリージョンのヘッダーが含まれる
            response = e.response
            region = _bucket_region_header(response)
            if not region:
                self.logger.error(f"Error resolving region of bucket {self.s3_config.bucket}: {e}")
                raise ConfigurationError(
                    f"Could not resolve region of bucket {self.s3_config.bucket}: {e}"
                ) from e
            return region

        region = _bucket_region_header(response)
        self.logger.info(f"Resolved region of bucket {self.s3_config.bucket}: {region}")
        return region


def _bucket_region_header(response) -> Optional[str]:
    headers = response.get("ResponseMetadata", {}).get("HTTPHeaders", {})
    return headers.get("x-amz-bucket-region")
