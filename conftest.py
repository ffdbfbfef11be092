"""pytest共通フィクスチャ"""
import pytest

from s3_mirror.models.config import Config
from s3_mirror.utils.logger import LoggerManager


@pytest.fixture(autouse=True)
def reset_logger():
    """テストごとにロガーを初期化"""
    LoggerManager.reset()
    yield
    LoggerManager.reset()


@pytest.fixture
def source_tree(tmp_path):
    """{a.txt, b.png, sub/c.txt} のソースディレクトリ"""
    root = tmp_path / "public"
    (root / "sub").mkdir(parents=True)
    (root / "a.txt").write_text("alpha")
    (root / "b.png").write_bytes(b"\x89PNG")
    (root / "sub" / "c.txt").write_text("gamma")
    return root


@pytest.fixture
def make_config(source_tree):
    """設定を作成するファクトリ"""
    def _make(s3=None, options=None):
        data = {
            "s3": {
                "source": str(source_tree),
                "bucket": "test-bucket",
                "region": "us-east-1",
            },
            "options": {"retry_delay_seconds": 0},
        }
        data["s3"].update(s3 or {})
        data["options"].update(options or {})
        return Config.from_dict(data)
    return _make
