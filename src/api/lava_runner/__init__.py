"""
どこで: `api.lava_runner` パッケージ。
何を: `api.lava.run_lava` の下請け（設定解決/パラメータ準備/GL 初期化）。
なぜ: ランナー本体を薄く保ち、個々の手順を単体でテスト可能にするため。
"""
