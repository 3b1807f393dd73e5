"""
どこで: `engine.runtime` サブパッケージ。
何を: フレームスケジューラへ渡す明示的な描画状態レコード（RenderState）を提供。
なぜ: 初期化の成果物をまとめて受け渡し、描画ループから暗黙の共有状態を排除するため。
"""
