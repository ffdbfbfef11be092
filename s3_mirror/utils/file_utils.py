"""ファイル操作関連のユーティリティ"""
import mimetypes
import os
import re
import stat
from typing import List, Optional, Pattern

from ..errors import IgnorePatternError


DEFAULT_CONTENT_TYPE = "application/octet-stream"


def translate_glob(pattern: str) -> str:
    """グロブパターンを正規表現に変換

    `*` と `?` は `/` をまたがない。`**` は `/` をまたいでマッチし、
    `**/` は0個以上のディレクトリにマッチする。`[...]` と `{a,b}` にも対応。
    """
    i, n = 0, len(pattern)
    parts: List[str] = []
    brace_depth = 0

    while i < n:
        c = pattern[i]
        i += 1

        if c == "*":
            if i < n and pattern[i] == "*":
                i += 1
                if i < n and pattern[i] == "/":
                    i += 1
                    parts.append("(?:.*/)?")
                else:
                    parts.append(".*")
            else:
                parts.append("[^/]*")
        elif c == "?":
            parts.append("[^/]")
        elif c == "[":
            j = i
            if j < n and pattern[j] in "!^":
                j += 1
            # 先頭の ] はリテラル
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                raise IgnorePatternError(pattern, "unterminated character class")

            body = pattern[i:j].replace("\\", "\\\\")
            i = j + 1
            if body[0] in "!^":
                body = "^" + body[1:]
            parts.append(f"[{body}]")
        elif c == "{":
            brace_depth += 1
            parts.append("(?:")
        elif c == "}" and brace_depth:
            brace_depth -= 1
            parts.append(")")
        elif c == "," and brace_depth:
            parts.append("|")
        elif c == "\\":
            if i >= n:
                raise IgnorePatternError(pattern, "trailing escape character")
            parts.append(re.escape(pattern[i]))
            i += 1
        else:
            parts.append(re.escape(c))

    if brace_depth:
        raise IgnorePatternError(pattern, "unterminated brace expression")

    return "^" + "".join(parts) + r"\Z"


def compile_glob(pattern: str) -> Pattern[str]:
    """グロブパターンをコンパイル"""
    try:
        return re.compile(translate_glob(pattern), re.DOTALL)
    except re.error as e:
        raise IgnorePatternError(pattern, str(e)) from e


def guess_content_type(path: str) -> str:
    """拡張子からContent-Typeを判定"""
    content_type, _ = mimetypes.guess_type(path, strict=False)
    return content_type or DEFAULT_CONTENT_TYPE


class PathFilter:
    """除外パターンによるパスのフィルタ"""

    def __init__(self, patterns: Optional[List[str]] = None):
        self.patterns = list(patterns or [])
        # 不正なパターンはここで例外になる
        self._compiled = [compile_glob(pattern) for pattern in self.patterns]

    def is_uploadable(self, relative_path: str) -> bool:
        """相対パスがどの除外パターンにも一致しなければTrue"""
        for regex in self._compiled:
            if regex.fullmatch(relative_path):
                return False
        return True


class FileScanner:
    """ファイルスキャン機能"""

    def __init__(self, ignore_patterns: Optional[List[str]] = None):
        self.ignore_patterns = ignore_patterns or []

    def list_files(self, source_root: str) -> List[str]:
        """アップロード対象ファイルの相対パスを列挙

        除外パターンに一致したディレクトリの中も走査し、
        ファイルごとに判定する。走査中のI/Oエラーはそのまま送出する。
        """
        path_filter = PathFilter(self.ignore_patterns)

        if not os.path.isdir(source_root):
            raise NotADirectoryError(f"Not a directory: {source_root}")

        files: List[str] = []

        for root, dirs, names in os.walk(source_root, onerror=_raise_walk_error):
            dirs.sort()

            for name in sorted(names):
                file_path = os.path.join(root, name)
                relative_path = os.path.relpath(file_path, source_root).replace(os.sep, "/")

                if not path_filter.is_uploadable(relative_path):
                    continue

                # シンボリックリンクは辿り、通常ファイルのみ対象にする
                if not stat.S_ISREG(os.stat(file_path).st_mode):
                    continue

                files.append(relative_path)

        return files


def _raise_walk_error(error: OSError):
    raise error
