"""
どこで: `engine.render` サブパッケージ。
何を: シェーダのビルド、全面クアッド、uniform 契約、描画先バッファを提供。
なぜ: フレーム駆動（core）と GPU リソース管理を分離し、GL 依存を局所化するため。
"""
