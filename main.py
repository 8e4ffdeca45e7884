"""
どこで: リポジトリ直下 `main.py`。
何を: ベジェ曲線とギズモのデモウィンドウを開く。
なぜ: 動作確認用の最小エントリポイントとして利用するため。
"""

import logging
import sys

sys.path.append("src")

from gizmesh.interactive.runtime.overlay_window import run

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run(config_path=sys.argv[1] if len(sys.argv) > 1 else None)
