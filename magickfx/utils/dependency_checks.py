"""環境依存ツールの健全性チェックを提供するユーティリティ。"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from typing import Optional

from ..exceptions import DependencyError
from .logger import KVLogger
from .magick_runner import magick_binary, run_magick_async

_VERSION_PATTERN = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?")
_MAGICK_VERSION_PATTERN = re.compile(r"ImageMagick\s+(\d+(?:\.\d+){0,2}(?:-\d+)?)")

INSTALL_HINT = "See install instructions for Image Magick here: https://imagemagick.org"


@dataclass(frozen=True)
class VersionRequirement:
    """バージョン互換性チェックに利用する正規化済みバージョン情報。"""

    major: int
    minor: int
    patch: int = 0

    @classmethod
    def parse(cls, version_str: str) -> "VersionRequirement":
        """任意形式のバージョン文字列から数値のみを抽出して正規化する。"""

        match = _VERSION_PATTERN.search(version_str)
        if not match:
            raise ValueError(f"Unsupported version string: '{version_str}'")
        major = int(match.group(1))
        minor = int(match.group(2) or 0)
        patch = int(match.group(3) or 0)
        return cls(major=major, minor=minor, patch=patch)

    def satisfies(self, minimum: "VersionRequirement") -> bool:
        """自身が要求バージョン以上であるかを判定する。"""

        return (self.major, self.minor, self.patch) >= (
            minimum.major,
            minimum.minor,
            minimum.patch,
        )


async def get_magick_version(binary: Optional[str] = None) -> Optional[str]:
    """magick のバージョン文字列 (例: ``7.1.1-21``) を返す。失敗時は None。"""

    try:
        result = await run_magick_async(
            [binary or magick_binary(), "-version"], error_log_level=logging.DEBUG
        )
    except (FileNotFoundError, PermissionError, subprocess.CalledProcessError):
        return None
    match = _MAGICK_VERSION_PATTERN.search(result.stdout)
    return match.group(1) if match else None


async def ensure_magick_installed(
    logger: KVLogger,
    *,
    min_version: str = "7.0",
    binary: Optional[str] = None,
) -> str:
    """magick の実行可否と最低バージョンを検証する。"""

    tool = binary or magick_binary()
    minimum_version = VersionRequirement.parse(min_version)

    version_raw = await get_magick_version(tool)
    if not version_raw:
        logger.kv_error(
            "Image Magick is not installed locally. " + INSTALL_HINT,
            kv_pairs={
                "Event": "DependencyCheck",
                "Tool": tool,
                "Status": "NotDetected",
                "MinimumVersion": min_version,
            },
        )
        raise DependencyError(
            f"Image Magick is not installed locally ('{tool}' was not found). {INSTALL_HINT}"
        )

    version = VersionRequirement.parse(version_raw)
    if not version.satisfies(minimum_version):
        logger.kv_error(
            "Image Magick is too old. " + INSTALL_HINT,
            kv_pairs={
                "Event": "DependencyCheck",
                "Tool": tool,
                "Status": "VersionTooOld",
                "ReportedVersion": version_raw,
                "MinimumVersion": min_version,
            },
        )
        raise DependencyError(
            f"Image Magick {min_version}+ is required, but {version_raw} is installed. {INSTALL_HINT}"
        )

    logger.kv_debug(
        "Image Magick is available.",
        kv_pairs={
            "Event": "DependencyCheck",
            "Tool": tool,
            "Status": "OK",
            "Version": version_raw,
        },
    )
    return version_raw
