"""
どこで: `util.utils`。
何を: YAML 構成の読み込み（フェイルソフト）と、セクション取り出しの小ヘルパ。
なぜ: 起動時設定の探索順/上書き規則を一箇所に閉じ込め、ランナーを薄く保つため。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

logger = logging.getLogger(__name__)


def _safe_load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("config load failed: %s (%s)", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _find_project_root(start: Path) -> Path:
    """プロジェクトルートを推定して返す。

    - `src/` 配下から呼ばれることを想定し、上位に `.git` や `pyproject.toml`、`configs/` がある
      もっとも近いディレクトリを返す。
    - 見つからない場合は `start.parent.parent` をフォールバックとして返す。
    """
    cur = start.resolve()
    for parent in [cur] + list(cur.parents):
        if (
            (parent / ".git").exists()
            or (parent / "pyproject.toml").exists()
            or (parent / "configs").exists()
        ):
            return parent
    # 典型: <repo>/src/util/utils.py -> <repo>
    return cur.parent.parent


def load_config(extra_path: Path | str | None = None) -> Dict[str, Any]:
    """構成を読み込んで辞書で返す（フェイルソフト）。

    優先順（後勝ち）:
    1) `configs/default.yaml`（ベース）
    2) ルート `config.yaml`
    3) `extra_path`（CLI の `--config` 等で明示されたファイル）

    - いずれも存在しない/不正な場合は空辞書を返す。
    - ネストした辞書のディープマージは行わず、トップレベルのみ上書き。
    """
    project_root = _find_project_root(Path(__file__).parent)
    base: Dict[str, Any] = {}

    default_path = project_root / "configs" / "default.yaml"
    if default_path.exists():
        base.update(_safe_load_yaml(default_path))

    root_config_path = project_root / "config.yaml"
    if root_config_path.exists():
        base.update(_safe_load_yaml(root_config_path))

    if extra_path is not None:
        p = Path(extra_path)
        if p.exists():
            base.update(_safe_load_yaml(p))
        else:
            logger.warning("config file not found: %s", p)

    return base


def config_section(cfg: Mapping[str, Any] | None, key: str) -> Dict[str, Any]:
    """`cfg[key]` が辞書ならそのコピーを、それ以外は空辞書を返す。"""
    if not isinstance(cfg, Mapping):
        return {}
    section = cfg.get(key)
    return dict(section) if isinstance(section, Mapping) else {}


__all__ = ["load_config", "config_section"]
