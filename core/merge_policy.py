"""
Merge Policy — 計算要套用的最終 mapping

給定原始快照 (original)、想要的覆寫 (desired) 與模式 (mode)，
算出實際要寫回全域表的 mapping。純函式，不改動任何輸入。

模式：
    ALLOW_OVERRIDE  desired 的值覆蓋原值；值為 None 代表刪除該 key
    DENY_OVERRIDE   只補上原本不存在的 key；已存在的 key 不動，
                    值為 None 的項目整個忽略（沒有「拒絕刪除」這回事）

用法：
    from core.merge_policy import OverrideMode, compute_effective

    compute_effective({"A": "1", "B": "2"}, {"A": "9", "C": None},
                      OverrideMode.ALLOW_OVERRIDE)
    → {"A": "9", "B": "2"}

    compute_effective({"A": "1"}, {"A": "9", "D": "5"},
                      OverrideMode.DENY_OVERRIDE)
    → {"A": "1", "D": "5"}
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping

from core.exceptions import InvalidConfigError


class OverrideMode(Enum):
    """覆寫模式"""

    ALLOW_OVERRIDE = "allow_override"
    DENY_OVERRIDE = "deny_override"

    @classmethod
    def parse(cls, text: str, key: str = "mode") -> "OverrideMode":
        """由字串取得模式，不分大小寫，接受 name 或 value"""
        normalized = text.strip().lower()
        for mode in cls:
            if normalized in (mode.name.lower(), mode.value):
                return mode
        raise InvalidConfigError(
            key=key,
            value=text,
            reason=f"可用值: {', '.join(m.name for m in cls)}",
        )


def compute_effective(
    original: Mapping[str, str],
    desired: Mapping[str, str | None],
    mode: OverrideMode,
) -> dict[str, str | None]:
    """算出要套用到全域表的 mapping"""
    if mode is OverrideMode.ALLOW_OVERRIDE:
        return _overridden_with(original, desired)
    return _completed_with(original, desired)


def _overridden_with(original: Mapping[str, str],
                     desired: Mapping[str, str | None]) -> dict[str, str | None]:
    merged: dict[str, str | None] = dict(original)
    for key, value in desired.items():
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = value
    return merged


def _completed_with(original: Mapping[str, str],
                    desired: Mapping[str, str | None]) -> dict[str, str | None]:
    merged: dict[str, str | None] = dict(original)
    for key, value in desired.items():
        if value is not None and key not in merged:
            merged[key] = value
    return merged
