#!/usr/bin/env python3
"""
条件プラグインのホスト API を起動するエントリポイント
"""
import sys
from pathlib import Path

# プロジェクトルートをPYTHONPATHに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import uvicorn

from infrastructure.settings.env_settings import load_settings

if __name__ == "__main__":
    settings = load_settings()
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        log_level=settings.log_level.lower(),
        reload=True,  # 開発時の自動リロード
    )
