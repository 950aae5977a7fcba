"""JSON 元数据文件读取工具

composer.json / composer.lock 来自第三方包，内容不可信：
读取失败或格式错误一律视为"没有该文件"，由调用方决定是否继续后续检查。
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def load_json(path: str | Path) -> dict[str, Any]:
    """宽松读取 JSON 对象文件

    返回:
        dict: 解析后的字典。文件不存在、不可读、格式错误或顶层不是对象时返回空字典
    """
    p = Path(path)
    if not p.is_file():
        return {}

    try:
        with open(p, encoding="utf-8") as f:
            result = json.load(f)
    except (OSError, ValueError) as e:
        logger.debug("忽略无法解析的 JSON 文件: %s (%s)", p, e)
        return {}

    if not isinstance(result, dict):
        logger.debug("忽略非对象类型的 JSON 文件: %s", p)
        return {}
    return result


def dump_json(path: str | Path, data: Any) -> None:
    """写入 JSON 文件（自动创建父目录）"""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=4, ensure_ascii=False)
